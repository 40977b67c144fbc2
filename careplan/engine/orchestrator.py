"""Orchestrator - loads inputs from the store, runs the core and persists results."""

from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from sqlalchemy.orm import Session

from careplan.domain.models import StaffAllocation, TimetableEntry
from careplan.domain.repositories import (
    ActivityTemplateRepository,
    ChildRepository,
    StaffAllocationRepository,
    StaffRepository,
    TimetableRepository,
)
from careplan.domain.values import ActivityTemplateInput, Allocation, GeneratedBlock, StaffIdentity, TimeBlock, TimeWindow
from careplan.services.constraints import validate_allocations, validate_generated_blocks
from careplan.services.timeplan import duration_minutes, to_minutes

from .allocator import allocate
from .timetable import MAX_BLOCKS, generate_schedule


class Orchestrator:
    """
    Coordinates the timetable generator and the staff allocator with the store.

    The core functions never touch the database; this class owns loading their
    inputs and persisting their outputs.
    """

    def __init__(self, max_blocks: int = MAX_BLOCKS):
        self.max_blocks = max_blocks

    def plan_child_day(
        self,
        session: Session,
        child_id: int,
        day: str,
        window: TimeWindow,
        persist: bool = True,
    ) -> List[GeneratedBlock]:
        """
        Generate a timetable for one child on one date.

        Args:
            session: Database session
            child_id: Child to plan for
            day: Date (YYYY-MM-DD)
            window: Time window to fill
            persist: If True, replace the child's stored entries for that date
                and drop the child's allocations built from the old entries

        Returns:
            Generated blocks

        Raises:
            RuntimeError: If the child does not exist
        """
        child = ChildRepository.get_by_id(session, child_id)
        if child is None:
            raise RuntimeError(f"Child {child_id} not found")

        templates = [
            ActivityTemplateInput(id=t.id, title=t.title, duration_mins=t.duration_mins)
            for t in ActivityTemplateRepository.get_all(session)
        ]
        print(f"[INFO] Planning {child.name} on {day} ({window.start}-{window.end}) with {len(templates)} templates")
        if not templates:
            print("[WARN] No activity templates defined; timetable will be empty")

        blocks = generate_schedule(window, templates, max_blocks=self.max_blocks)
        validate_generated_blocks(window, blocks)
        print(f"[OK] Generated {len(blocks)} blocks")

        if persist:
            deleted = TimetableRepository.delete_for_child(session, child_id, day)
            if deleted > 0:
                print(f"[INFO] Deleted {deleted} existing timetable entries for child {child_id} on {day}")
            stale = StaffAllocationRepository.delete_for_child(session, child_id, day)
            if stale > 0:
                print(f"[WARN] Dropped {stale} allocations for child {child_id} on {day}; re-run allocation for {day}")
            TimetableRepository.bulk_create(
                session,
                [
                    TimetableEntry(child_id=child_id, date=day, activity=b.activity, start=b.start, end=b.end)
                    for b in blocks
                ],
            )
            print(f"[INFO] Persisted {len(blocks)} timetable entries")

        return blocks

    def allocate_day(self, session: Session, day: str, persist: bool = True) -> List[Allocation]:
        """
        Assign staff to every timetable entry on a date.

        Args:
            session: Database session
            day: Date (YYYY-MM-DD)
            persist: If True, replace stored allocations for the date and stamp
                the assigned staff onto the timetable entries

        Returns:
            Allocations in processing order
        """
        staff = [StaffIdentity(id=s.id, name=s.name) for s in StaffRepository.get_all(session)]
        entries = TimetableRepository.get_by_date(session, day)
        print(f"[INFO] Allocating {len(staff)} staff across {len(entries)} blocks on {day}")
        if not staff:
            print("[WARN] No staff available; no allocations produced")

        # Same stable ordering the allocator uses, so results line up with entries
        entries = sorted(entries, key=lambda e: (e.date, to_minutes(e.start)))
        blocks = [TimeBlock(child_id=e.child_id, date=e.date, start=e.start, end=e.end) for e in entries]
        allocations = allocate(staff, blocks)
        validate_allocations(allocations)

        conflicts = sum(1 for a in allocations if a.conflict)
        if conflicts:
            print(f"[WARN] {conflicts} block(s) double-booked (no free staff)")
        print(f"[OK] Produced {len(allocations)} allocations")

        if persist:
            deleted = StaffAllocationRepository.delete_by_date(session, day)
            if deleted > 0:
                print(f"[INFO] Deleted {deleted} existing allocations for {day}")
            StaffAllocationRepository.bulk_create(
                session,
                [
                    StaffAllocation(
                        child_id=a.child_id,
                        staff_id=a.staff_id,
                        date=a.date,
                        start=a.start,
                        end=a.end,
                        conflict=a.conflict,
                    )
                    for a in allocations
                ],
            )
            for entry, alloc in zip(entries, allocations):
                entry.staff_id = alloc.staff_id
            session.commit()
            print(f"[INFO] Persisted {len(allocations)} allocations")

        return allocations


def plan_child_day(
    session: Session,
    child_id: int,
    day: str,
    window: TimeWindow,
    persist: bool = True,
    max_blocks: int = MAX_BLOCKS,
) -> List[GeneratedBlock]:
    """Convenience wrapper around Orchestrator.plan_child_day."""
    return Orchestrator(max_blocks).plan_child_day(session, child_id, day, window, persist=persist)


def allocate_day(session: Session, day: str, persist: bool = True) -> List[Allocation]:
    """Convenience wrapper around Orchestrator.allocate_day."""
    return Orchestrator().allocate_day(session, day, persist=persist)


def summarize_allocations(allocations: Sequence[Allocation]) -> str:
    if not allocations:
        return "No allocations."
    per_staff = Counter(a.staff_id for a in allocations)
    minutes = Counter()
    for a in allocations:
        minutes[a.staff_id] += duration_minutes(a.start, a.end)
    conflicts = [a for a in allocations if a.conflict]

    lines = ["Blocks per staff member:"]
    for staff_id, count in sorted(per_staff.items(), key=lambda kv: (-kv[1], str(kv[0]))):
        lines.append(f"  {staff_id}: {count} blocks, {minutes[staff_id]} mins")
    lines.append("")
    lines.append(f"Conflicts: {len(conflicts)}")
    for a in conflicts:
        lines.append(f"  {a.date} {a.start}-{a.end} child {a.child_id} -> staff {a.staff_id}")
    return "\n".join(lines)
