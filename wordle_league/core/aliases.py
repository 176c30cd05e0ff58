#!/usr/bin/python
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from .store import ResultStore, normalize_handle

logger = logging.getLogger(__name__)


def normalize(s: str) -> str:
    # Keep only alphanumerics for fuzzy matching
    return "".join(ch for ch in s if ch.isalnum()).casefold()


@dataclass(frozen=True)
class MemberEntry:
    user_id: str
    names: Tuple[str, ...]


def _member_names(m) -> Tuple[str, ...]:
    fields = [
        getattr(m, "name", "") or "",
        getattr(m, "display_name", "") or "",
        getattr(m, "global_name", "") or "",
        getattr(m, "nick", "") or "",
    ]
    return tuple(f.strip() for f in fields if f and f.strip())


class MemberDirectory:
    """
    Snapshot of guild members used to turn plain "@name" handles into user ids.

    The directory is empty until refresh() is called; the bot refreshes it on
    start and then on a schedule. Lookups never touch Discord.
    """

    def __init__(self):
        self._members: List[MemberEntry] = []
        self.refreshed_at: Optional[datetime] = None

    def __len__(self):
        return len(self._members)

    def refresh(self, members: Iterable) -> int:
        entries = []
        for m in members:
            uid = getattr(m, "id", None)
            if uid is None:
                continue
            entries.append(MemberEntry(user_id=str(uid), names=_member_names(m)))
        self._members = entries
        self.refreshed_at = datetime.now(timezone.utc)
        logger.info("MemberDirectory.refresh: indexed %s members", len(entries))
        return len(entries)

    def lookup(self, handle: str) -> Optional[str]:
        name = (handle or "").strip().lstrip("@").strip()
        if not name:
            return None
        name_ci = name.casefold()

        # Case-insensitive exact matches against several name fields
        for m in self._members:
            if any(n.casefold() == name_ci for n in m.names):
                return m.user_id

        # Try normalized exact match (strip non-alphanum)
        name_norm = normalize(name)
        if name_norm:
            for m in self._members:
                if any(normalize(n) == name_norm for n in m.names):
                    return m.user_id

        # As a last resort, try unique prefix match (case-insensitive) on any field
        prefix_matches = [m for m in self._members if any(n.casefold().startswith(name_ci) for n in m.names)]
        if len(prefix_matches) == 1:
            return prefix_matches[0].user_id

        if prefix_matches:
            logger.warning("MemberDirectory.lookup: handle '%s' is ambiguous (%s candidates)", name, len(prefix_matches))
        return None


class AliasResolver:
    """
    resolve(handle) -> user id or None.
    Explicit aliases from the store win over the member directory.
    """

    def __init__(self, store: ResultStore, directory: MemberDirectory):
        self.store = store
        self.directory = directory

    def resolve(self, handle: str) -> Optional[str]:
        if handle and handle.isdigit():
            return handle

        key = normalize_handle(handle)
        if not key:
            return None

        user_id = self.store.get_alias(key)
        if user_id is not None:
            logger.debug("resolve: %s -> %s (alias table)", key, user_id)
            return user_id

        user_id = self.directory.lookup(key)
        if user_id is not None:
            logger.debug("resolve: %s -> %s (member directory)", key, user_id)
            return user_id

        logger.warning("resolve: could not resolve handle '%s'", key)
        return None
