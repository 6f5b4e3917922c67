"""Optional memoization of computed reports."""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import asdict
from datetime import date
from typing import Any, Callable, Optional, Protocol

from project_health_engine.schema import ProjectBundle


class ReportCache(Protocol):
    """Storage port for cached reports; implementations own expiry."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        ...


class InMemoryTTLCache:
    """Process-local cache with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        now = self._clock()
        self.purge_expired(now)
        self._entries[key] = (now + ttl_seconds, value)

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Drop every expired entry; returns how many were removed."""

        if now is None:
            now = self._clock()
        stale = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def invalidate(self, prefix: str = "") -> int:
        """Drop entries whose key starts with ``prefix``; returns how many."""

        stale = [key for key in self._entries if key.startswith(prefix)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)


def bundle_fingerprint(bundle: ProjectBundle, now: date) -> str:
    payload = json.dumps({"bundle": asdict(bundle), "now": now.isoformat()}, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def cache_key(bundle: ProjectBundle, now: date) -> str:
    """Key a report by project id and a hash of every input that feeds it."""

    return f"project_dashboard:{bundle.project.id}:{bundle_fingerprint(bundle, now)}"
