"""Scheduling core (timetable generator, staff allocator) and its orchestrator."""

from .allocator import allocate
from .orchestrator import Orchestrator, allocate_day, plan_child_day, summarize_allocations
from .timetable import MAX_BLOCKS, generate_schedule

__all__ = [
    "MAX_BLOCKS",
    "generate_schedule",
    "allocate",
    "Orchestrator",
    "plan_child_day",
    "allocate_day",
    "summarize_allocations",
]
