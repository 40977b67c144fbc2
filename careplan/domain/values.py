"""Plain value records exchanged with the scheduling core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ID = Union[int, str]


@dataclass(frozen=True)
class TimeWindow:
    start: str  # HH:MM
    end: str  # HH:MM


@dataclass(frozen=True)
class ActivityTemplateInput:
    id: ID
    title: str
    duration_mins: int


@dataclass(frozen=True)
class GeneratedBlock:
    start: str
    end: str
    activity: str


@dataclass(frozen=True)
class StaffIdentity:
    id: ID
    name: str


@dataclass(frozen=True)
class TimeBlock:
    child_id: ID
    date: str  # YYYY-MM-DD
    start: str
    end: str


@dataclass(frozen=True)
class Allocation:
    child_id: ID
    staff_id: ID
    date: str
    start: str
    end: str
    conflict: bool = False
