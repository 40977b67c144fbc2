"""CSV export utilities."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from careplan.domain.repositories import ProgressLogRepository, StaffAllocationRepository, TimetableRepository


def export_timetable_csv(session: Session, csv_path: str | Path, day: str | None = None) -> int:
    """Export timetable entries (optionally one date) to CSV. Returns row count."""
    entries = TimetableRepository.get_by_date(session, day) if day else TimetableRepository.get_all(session)
    df = pd.DataFrame(
        [
            {
                "child_id": e.child_id,
                "date": e.date,
                "start": e.start,
                "end": e.end,
                "activity": e.activity,
                "staff_id": e.staff_id,
            }
            for e in entries
        ],
        columns=["child_id", "date", "start", "end", "activity", "staff_id"],
    )
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} timetable entries to {csv_path}")
    return len(df)


def export_allocations_csv(session: Session, csv_path: str | Path, day: str | None = None) -> int:
    """Export staff allocations (optionally one date) to CSV. Returns row count."""
    allocations = (
        StaffAllocationRepository.get_by_date(session, day) if day else StaffAllocationRepository.get_all(session)
    )
    df = pd.DataFrame(
        [
            {
                "child_id": a.child_id,
                "staff_id": a.staff_id,
                "date": a.date,
                "start": a.start,
                "end": a.end,
                "conflict": bool(a.conflict),
            }
            for a in allocations
        ],
        columns=["child_id", "staff_id", "date", "start", "end", "conflict"],
    )
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} allocations to {csv_path}")
    return len(df)


def export_progress_csv(session: Session, csv_path: str | Path, child_id: int | None = None) -> int:
    """Export progress logs (optionally one child) to CSV. Returns row count."""
    logs = (
        ProgressLogRepository.get_for_child(session, child_id)
        if child_id is not None
        else ProgressLogRepository.get_all(session)
    )
    df = pd.DataFrame(
        [
            {
                "child_id": log.child_id,
                "date": log.date,
                "completed": bool(log.completed),
                "engagement": log.engagement,
                "notes": log.notes,
            }
            for log in logs
        ],
        columns=["child_id", "date", "completed", "engagement", "notes"],
    )
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} progress logs to {csv_path}")
    return len(df)
