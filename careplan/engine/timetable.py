"""Greedy timetable generator: fills a time window with activity templates in order."""

from __future__ import annotations

from typing import List, Sequence

from careplan.domain.values import ActivityTemplateInput, GeneratedBlock, TimeWindow
from careplan.services.timeplan import to_hhmm, to_minutes

MAX_BLOCKS = 1000


def generate_schedule(
    window: TimeWindow,
    templates: Sequence[ActivityTemplateInput],
    max_blocks: int = MAX_BLOCKS,
) -> List[GeneratedBlock]:
    """
    Fill a time window with activity blocks, cycling through templates round-robin.

    Args:
        window: Start/end bounds of the day segment
        templates: Ordered activity templates (cycled 0, 1, ..., 0, 1, ...)
        max_blocks: Safety ceiling on accepted blocks; output is truncated silently

    Returns:
        Contiguous, non-overlapping blocks. Stops as soon as the next template
        does not fit in the remaining window (no partial blocks).
    """
    blocks: List[GeneratedBlock] = []
    cursor = to_minutes(window.start)
    end = to_minutes(window.end)
    if cursor >= end or not templates:
        return blocks

    i = 0  # advances once per accepted block
    while cursor < end and i < max_blocks:
        template = templates[i % len(templates)]
        next_end = cursor + template.duration_mins
        if next_end > end:
            break
        blocks.append(GeneratedBlock(start=to_hhmm(cursor), end=to_hhmm(next_end), activity=template.title))
        cursor = next_end
        i += 1

    return blocks
