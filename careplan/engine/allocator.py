"""Greedy staff allocator with double-booking detection."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from careplan.domain.values import ID, Allocation, StaffIdentity, TimeBlock
from careplan.services.constraints import is_staff_free
from careplan.services.timeplan import to_minutes


def allocate(staff: Sequence[StaffIdentity], blocks: Sequence[TimeBlock]) -> List[Allocation]:
    """
    Assign one staff member to each block, earliest blocks first.

    Blocks are processed in stable (date, start) order. Each block goes to the
    first staff member (in the given order) with no overlapping commitment on
    that date. When nobody is free, the block is forced onto ``staff[0]`` and
    flagged with ``conflict=True``. With no staff at all, no allocations are
    produced.

    Args:
        staff: Candidate staff in priority order
        blocks: Child time blocks to cover

    Returns:
        Allocations in processing order (not input order)
    """
    allocations: List[Allocation] = []
    if not staff:
        return allocations

    by_staff: Dict[ID, List[Allocation]] = defaultdict(list)
    ordered = sorted(blocks, key=lambda b: (b.date, to_minutes(b.start)))

    for block in ordered:
        chosen = next((s for s in staff if is_staff_free(by_staff[s.id], block)), None)
        conflict = chosen is None
        if conflict:
            # Nobody free: pick first but mark conflict
            chosen = staff[0]

        alloc = Allocation(
            child_id=block.child_id,
            staff_id=chosen.id,
            date=block.date,
            start=block.start,
            end=block.end,
            conflict=conflict,
        )
        by_staff[chosen.id].append(alloc)
        allocations.append(alloc)

    return allocations
