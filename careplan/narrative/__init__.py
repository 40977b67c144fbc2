"""Narrative text client with offline fallbacks."""

from .client import (
    CACHED,
    FAILED,
    FALLBACK,
    FRESH,
    MemoryCache,
    NarrativeClient,
    NarrativeResult,
    SessionCache,
    anonymize_logs_locally,
)
from .payloads import (
    child_payload,
    day_summary_payload,
    mapping_context_payload,
    progress_log_payload,
    timetable_payload,
)

__all__ = [
    "FRESH",
    "CACHED",
    "FALLBACK",
    "FAILED",
    "NarrativeClient",
    "NarrativeResult",
    "MemoryCache",
    "SessionCache",
    "anonymize_logs_locally",
    "child_payload",
    "progress_log_payload",
    "timetable_payload",
    "day_summary_payload",
    "mapping_context_payload",
]
