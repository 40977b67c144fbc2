"""Time-of-day arithmetic shared by the generator and the allocator."""

from __future__ import annotations


def to_minutes(hhmm: str) -> int:
    """Convert an "HH:MM" string to minutes since midnight."""
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def to_hhmm(mins: int) -> str:
    """Convert minutes since midnight back to a zero-padded "HH:MM" string."""
    hours, minutes = divmod(mins, 60)
    return f"{hours:02d}:{minutes:02d}"


def overlaps(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """
    Check whether two half-open time ranges share at least one instant.

    Ranges that merely touch (one ends when the other starts) do not overlap.
    """
    return max(to_minutes(a_start), to_minutes(b_start)) < min(to_minutes(a_end), to_minutes(b_end))


def duration_minutes(start: str, end: str) -> int:
    """Length of a range in minutes."""
    return to_minutes(end) - to_minutes(start)
