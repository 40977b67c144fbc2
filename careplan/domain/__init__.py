"""Domain models, value records and data access layer."""

from .models import ActivityTemplate, Base, Child, NarrativeCache, ProgressLog, Staff, StaffAllocation, TimetableEntry
from .repositories import (
    ActivityTemplateRepository,
    ChildRepository,
    NarrativeCacheRepository,
    ProgressLogRepository,
    StaffAllocationRepository,
    StaffRepository,
    TimetableRepository,
)
from .values import ActivityTemplateInput, Allocation, GeneratedBlock, StaffIdentity, TimeBlock, TimeWindow

__all__ = [
    "Base",
    "Child",
    "Staff",
    "ActivityTemplate",
    "TimetableEntry",
    "StaffAllocation",
    "ProgressLog",
    "NarrativeCache",
    "ChildRepository",
    "StaffRepository",
    "ActivityTemplateRepository",
    "TimetableRepository",
    "StaffAllocationRepository",
    "ProgressLogRepository",
    "NarrativeCacheRepository",
    "TimeWindow",
    "ActivityTemplateInput",
    "GeneratedBlock",
    "StaffIdentity",
    "TimeBlock",
    "Allocation",
]
