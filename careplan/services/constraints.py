"""Constraint checking and validation for timetables and staff allocations."""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple

from careplan.domain.values import Allocation, GeneratedBlock, TimeBlock, TimeWindow

from .timeplan import overlaps, to_minutes

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def is_staff_free(existing: Iterable[Allocation], block: TimeBlock) -> bool:
    """
    Check if a staff member can take a block given their allocations so far.

    Args:
        existing: Allocations already given to this staff member in the current run
        block: Block being considered

    Returns:
        True if no existing allocation shares the date and overlaps in time
    """
    return not any(
        alloc.date == block.date and overlaps(alloc.start, alloc.end, block.start, block.end)
        for alloc in existing
    )


def validate_allocations(allocations: Sequence[Allocation]) -> None:
    """
    Validate that no staff member is double-booked outside flagged conflicts.

    Args:
        allocations: Allocations produced for one or more dates

    Raises:
        ValueError: If two non-conflict allocations of the same staff member overlap
    """
    by_staff_date: Dict[Tuple, List[Allocation]] = defaultdict(list)
    for alloc in allocations:
        if not alloc.conflict:
            by_staff_date[(alloc.staff_id, alloc.date)].append(alloc)

    for (staff_id, day), day_allocs in by_staff_date.items():
        for i, a1 in enumerate(day_allocs):
            for a2 in day_allocs[i + 1:]:
                if overlaps(a1.start, a1.end, a2.start, a2.end):
                    raise ValueError(
                        f"Staff {staff_id} has overlapping allocations on {day}: "
                        f"{a1.start}-{a1.end} overlaps {a2.start}-{a2.end}"
                    )


def validate_generated_blocks(window: TimeWindow, blocks: Sequence[GeneratedBlock]) -> None:
    """Raise ValueError unless blocks are contiguous, increasing and inside the window."""
    cursor = to_minutes(window.start)
    limit = to_minutes(window.end)
    for block in blocks:
        start, end = to_minutes(block.start), to_minutes(block.end)
        if start != cursor:
            raise ValueError(f"Block {block.start}-{block.end} does not start at {cursor} minutes")
        if end <= start:
            raise ValueError(f"Block {block.start}-{block.end} is empty or reversed")
        if end > limit:
            raise ValueError(f"Block {block.start}-{block.end} exceeds window end {window.end}")
        cursor = end


def validate_time_string(value: str) -> str:
    """Return the value if it is a valid "HH:MM" time of day."""
    if not isinstance(value, str) or not _HHMM.match(value):
        raise ValueError(f"Invalid time of day (expected HH:MM): {value!r}")
    return value


def validate_window(window: TimeWindow) -> TimeWindow:
    validate_time_string(window.start)
    validate_time_string(window.end)
    if to_minutes(window.start) > to_minutes(window.end):
        raise ValueError(f"Window start {window.start} is after end {window.end}")
    return window


def validate_template_duration(duration_mins: int) -> int:
    if int(duration_mins) <= 0:
        raise ValueError(f"Activity duration must be positive, got {duration_mins}")
    return int(duration_mins)


def validate_engagement(engagement: int) -> int:
    # Engagement is scored 0-10
    if not 0 <= int(engagement) <= 10:
        raise ValueError(f"Engagement must be between 0 and 10, got {engagement}")
    return int(engagement)
