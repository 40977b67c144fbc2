"""Convert stored records into the JSON shapes the narrative backend expects."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from careplan.domain.models import Child, ProgressLog, Staff, TimetableEntry
from careplan.domain.values import GeneratedBlock


def child_payload(child: Child) -> Dict[str, Any]:
    return {"id": child.id, "name": child.name, "birthDate": child.birth_date, "notes": child.notes}


def progress_log_payload(log: ProgressLog) -> Dict[str, Any]:
    return {
        "childId": log.child_id,
        "date": log.date,
        "completed": bool(log.completed),
        "engagement": log.engagement,
        "notes": log.notes,
    }


def timetable_payload(day: str, blocks: Iterable[GeneratedBlock | TimetableEntry]) -> List[Dict[str, Any]]:
    return [{"date": day, "start": b.start, "end": b.end, "activity": b.activity} for b in blocks]


def day_summary_payload(day: str, logs: Iterable[ProgressLog]) -> Dict[str, Any]:
    return {"date": day, "entries": [progress_log_payload(log) for log in logs]}


def mapping_context_payload(day: str, staff: Iterable[Staff], entries: Iterable[TimetableEntry]) -> Dict[str, Any]:
    """Context for explaining a day's staff-to-block mapping."""
    return {
        "date": day,
        "staff": [{"id": s.id, "name": s.name} for s in staff],
        "blocks": [{"childId": e.child_id, "date": e.date, "start": e.start, "end": e.end} for e in entries],
    }
