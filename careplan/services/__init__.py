"""Services shared by the scheduling core and the application layer."""

from .constraints import is_staff_free, validate_allocations, validate_generated_blocks
from .timeplan import overlaps, to_hhmm, to_minutes

__all__ = [
    "is_staff_free",
    "validate_allocations",
    "validate_generated_blocks",
    "overlaps",
    "to_hhmm",
    "to_minutes",
]
