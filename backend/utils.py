# utils.py
# Helpers: timestamps, ids, confirmation codes, name joining, simple in-memory TTL cache

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List
import random
import secrets
import time

ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
# no I, O, 0, 1
CONFIRMATION_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def iso_ms(dt: datetime) -> str:
    """
    Clients parse ISO8601 in UTC with millisecond precision.
    Example: 2026-10-17T21:00:00.000Z
    """
    # naive datetimes are treated as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def now_iso() -> str:
    return iso_ms(datetime.now(timezone.utc))


def tonight_at(hour: int = 21) -> str:
    """Today at `hour`:00 local time, serialized in UTC."""
    local = datetime.now().astimezone()
    return iso_ms(local.replace(hour=hour, minute=0, second=0, microsecond=0))


def new_id(size: int = 21) -> str:
    """URL-safe random id."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))


def confirmation_code(length: int = 6) -> str:
    return "".join(random.choices(CONFIRMATION_ALPHABET, k=length))


def join_names(names: List[str]) -> str:
    """
    "A" / "A and B" / "A, B, and C"
    """
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


@dataclass
class CacheEntry:
    expires: float
    data: Any


class TTLCache:
    """Simple in-memory TTL cache (per-process)."""

    def __init__(self, ttl_seconds: float = 5):
        self.ttl = ttl_seconds
        self._store: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if not entry:
            return None
        if entry.expires < time.time():
            self._store.pop(key, None)
            return None
        return entry.data

    def set(self, key: str, value: Any) -> None:
        if self.ttl <= 0:
            return
        self._store[key] = CacheEntry(expires=time.time() + self.ttl, data=value)

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._store.clear()
        else:
            self._store.pop(key, None)
