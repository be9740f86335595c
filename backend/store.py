# store.py
# Entity store: load/save whole collections. JSON files on disk (with a short read cache) or in memory.

from __future__ import annotations

import asyncio
import copy
import json
import logging
from pathlib import Path
from typing import List

import pydantic

from errors import UpstreamFailure
from models import Booking, Interest, Invite, User, Venue
from utils import TTLCache

log = logging.getLogger("selene.store")

COLLECTIONS = ("users", "venues", "interests", "invites", "bookings")


class EntityStore:
    """
    Collection-level repository. Backends implement _read/_write on raw
    lists of dicts; callers use the typed load_*/save_* helpers.

    Writers must hold lock(name) across load -> mutate -> save so two
    requests in the same process cannot overwrite each other's changes.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def _read(self, name: str) -> list | None:
        raise NotImplementedError

    def _write(self, name: str, data: list) -> None:
        raise NotImplementedError

    def lock(self, name: str) -> asyncio.Lock:
        if name not in self._locks:
            self._locks[name] = asyncio.Lock()
        return self._locks[name]

    def load(self, name: str) -> list:
        if name not in COLLECTIONS:
            raise KeyError(name)
        data = self._read(name)
        # missing collection reads as empty
        return data if data is not None else []

    def save(self, name: str, data: list) -> None:
        if name not in COLLECTIONS:
            raise KeyError(name)
        self._write(name, data)

    def _load_as(self, name: str, model):
        try:
            return [model.model_validate(row) for row in self.load(name)]
        except pydantic.ValidationError as e:
            raise UpstreamFailure(f"Corrupt {name} data") from e

    def _save_from(self, name: str, items) -> None:
        self.save(name, [it.model_dump() for it in items])

    def load_users(self) -> List[User]:
        return self._load_as("users", User)

    def load_venues(self) -> List[Venue]:
        return self._load_as("venues", Venue)

    def load_interests(self) -> List[Interest]:
        return self._load_as("interests", Interest)

    def save_interests(self, items: List[Interest]) -> None:
        self._save_from("interests", items)

    def load_invites(self) -> List[Invite]:
        return self._load_as("invites", Invite)

    def save_invites(self, items: List[Invite]) -> None:
        self._save_from("invites", items)

    def load_bookings(self) -> List[Booking]:
        return self._load_as("bookings", Booking)

    def save_bookings(self, items: List[Booking]) -> None:
        self._save_from("bookings", items)


class JsonFileStore(EntityStore):
    """One <name>.json file per collection under data_dir."""

    def __init__(self, data_dir: str | Path, ttl_seconds: float = 5) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)
        self.cache = TTLCache(ttl_seconds=ttl_seconds)

    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def _read(self, name: str) -> list | None:
        hit = self.cache.get(name)
        if hit is not None:
            return copy.deepcopy(hit)
        path = self._path(name)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.error("failed to read %s: %s", path, e)
            raise UpstreamFailure(f"Failed to load {name}") from e
        if not isinstance(data, list):
            raise UpstreamFailure(f"Corrupt {name} data")
        self.cache.set(name, copy.deepcopy(data))
        return data

    def _write(self, name: str, data: list) -> None:
        path = self._path(name)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            log.error("failed to write %s: %s", path, e)
            raise UpstreamFailure(f"Failed to save {name}") from e
        finally:
            self.cache.invalidate(name)


class MemoryStore(EntityStore):
    """Dict-backed store for tests and demos."""

    def __init__(self, seed: dict[str, list] | None = None) -> None:
        super().__init__()
        self._data: dict[str, list] = {k: copy.deepcopy(v) for k, v in (seed or {}).items()}

    def _read(self, name: str) -> list | None:
        if name not in self._data:
            return None
        return copy.deepcopy(self._data[name])

    def _write(self, name: str, data: list) -> None:
        self._data[name] = copy.deepcopy(data)
