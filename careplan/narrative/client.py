"""
Client for the narrative text backend (summaries, coaching tips, rationale).

Every call degrades gracefully: a fresh response is cached, a failed request
falls back to the last cached response for the same key, then to a static
offline text. The scheduling core never depends on this module.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx
from sqlalchemy.orm import Session

from careplan.domain.repositories import NarrativeCacheRepository

FRESH = "fresh"
CACHED = "cached"
FALLBACK = "fallback"
FAILED = "failed"

FALLBACK_SUMMARY = {"text": "Today we focused on routine and engagement. We will build on strengths tomorrow."}
FALLBACK_MICROCOACH = {"text": "Give one clear instruction and praise specific effort."}
FALLBACK_ACTIVITY = {"activity": {"title": "Picture Matching", "steps": ["Match pictures"], "materials": ["Cards"]}}
FALLBACK_RATIONALE = {
    "text": "We alternated focus and movement, kept routines predictable, and aligned with known peak times."
}
FALLBACK_WEEKLY = {
    "text": "Observations: steady engagement. Next steps: maintain routines, add short movement breaks."
}


@dataclass(frozen=True)
class NarrativeResult:
    """Outcome of a narrative request and where its data came from."""

    source: str  # fresh | cached | fallback | failed
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.source != FAILED

    @property
    def text(self) -> str:
        return str((self.data or {}).get("text", ""))


class NarrativeCacheStore(Protocol):
    def get(self, key: str) -> Optional[Dict[str, Any]]: ...

    def put(self, key: str, data: Dict[str, Any]) -> None: ...


class MemoryCache:
    """In-process cache, useful for one-off runs and tests."""

    def __init__(self):
        self._entries: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        return self._entries.get(key)

    def put(self, key: str, data: Dict[str, Any]) -> None:
        self._entries[key] = data


class SessionCache:
    """Cache persisted in the narrative_cache table."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = NarrativeCacheRepository.get(self.session, key)
        if entry is None:
            return None
        try:
            return json.loads(entry.payload)
        except ValueError:
            print(f"[WARN] Ignoring unreadable cached narrative for {key}")
            return None

    def put(self, key: str, data: Dict[str, Any]) -> None:
        NarrativeCacheRepository.put(self.session, key, json.dumps(data))


def _key_fragment(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)[:128]


class NarrativeClient:
    """
    Synchronous client for the narrative backend's JSON endpoints.

    Args:
        base_url: Backend root, e.g. http://localhost:5000
        cache: Where last good responses are kept (default: in memory)
        timeout: Request timeout in seconds
        enabled: When False, no request is made and cache/fallback is used directly
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        cache: Optional[NarrativeCacheStore] = None,
        timeout: float = 12.0,
        enabled: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else MemoryCache()
        self.timeout = timeout
        self.enabled = enabled
        self.transport = transport

    def _post(
        self,
        path: str,
        payload: Dict[str, Any],
        cache_key: str,
        fallback: Optional[Dict[str, Any]],
    ) -> NarrativeResult:
        error = "narrative backend disabled"
        if self.enabled:
            try:
                with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
                    resp = client.post(path, json=payload)
                    resp.raise_for_status()
                    data = resp.json()
                self.cache.put(cache_key, data)
                return NarrativeResult(source=FRESH, data=data)
            except httpx.HTTPStatusError as e:
                error = f"HTTP {e.response.status_code}"
            except (httpx.HTTPError, ValueError) as e:
                error = str(e) or type(e).__name__
            print(f"[WARN] Narrative request {path} failed: {error}")

        cached = self.cache.get(cache_key)
        if cached is not None:
            return NarrativeResult(source=CACHED, data=cached, error=error)
        if fallback is not None:
            return NarrativeResult(source=FALLBACK, data=dict(fallback), error=error)
        return NarrativeResult(source=FAILED, error=error)

    def summarize(self, child_profile: Dict[str, Any], day_summary: Dict[str, Any]) -> NarrativeResult:
        """Parent-friendly daily summary for a child."""
        key = f"api:summarize:{child_profile.get('id', '')}:{day_summary.get('date', '')}"
        return self._post(
            "/api/summarize",
            {"childProfile": child_profile, "daySummary": day_summary},
            key,
            FALLBACK_SUMMARY,
        )

    def micro_coach(self, context: Dict[str, Any]) -> NarrativeResult:
        """One or two lines of coaching for the teacher."""
        key = f"api:microcoach:{_key_fragment(context)}"
        return self._post("/api/microcoach", {"context": context}, key, FALLBACK_MICROCOACH)

    def suggest_activity(self, constraints: Dict[str, Any]) -> NarrativeResult:
        key = f"api:activity:{_key_fragment(constraints)}"
        return self._post("/api/activity", {"constraints": constraints}, key, FALLBACK_ACTIVITY)

    def timetable_rationale(self, entries: List[Dict[str, Any]], child_profile: Dict[str, Any]) -> NarrativeResult:
        key = f"api:rationale:{child_profile.get('id', '')}:{len(entries)}"
        return self._post(
            "/api/timetable/rationale",
            {"entries": entries, "childProfile": child_profile},
            key,
            FALLBACK_RATIONALE,
        )

    def weekly_insights(self, logs: List[Dict[str, Any]], audience: str = "Teacher/Parent/Doctor") -> NarrativeResult:
        key = f"api:weekly:{audience}:{len(logs)}"
        return self._post("/api/weekly", {"logs": logs, "audience": audience}, key, FALLBACK_WEEKLY)

    def anonymize(self, logs: List[Dict[str, Any]]) -> NarrativeResult:
        """Strip identifying details from logs; offline fallback redacts locally."""
        key = f"api:anon:{len(logs)}"
        return self._post("/api/anon", {"logs": logs}, key, {"logs": anonymize_logs_locally(logs)})


def anonymize_logs_locally(logs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Replace the child id and redact free-text notes, keeping the metrics."""
    anon = []
    for log in logs:
        row = dict(log)
        row["childId"] = "anon"
        row["notes"] = "[redacted]" if log.get("notes") else None
        anon.append(row)
    return anon
