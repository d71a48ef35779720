"""
In-memory cache of user id -> roles, in front of a role store.

Entries are filled on first lookup and only refreshed by explicit
invalidation: role-mutating operations call `remove(user_id)` once the
mutation has succeeded, and `clear()` resets everything.

The lock guards the dicts only. The role store is queried outside the lock,
so two threads missing on the same user may both query the store; both write
the same answer. A fetch that overlaps an invalidation of the same user is
not written back.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from app.acl.models import Role

logger = logging.getLogger(__name__)


class RoleStore(Protocol):
    """Source of truth for role assignments. May raise StoreError."""

    def list_roles_for_user(self, user_id: int) -> list[Role]: ...


class RolesCache:
    def __init__(self, store: RoleStore) -> None:
        self._store = store
        self._entries: dict[int, tuple[Role, ...]] = {}
        # Bumped by remove() per user and by clear() globally. A fetch only
        # writes back if neither moved while the store was being queried.
        self._generations: dict[int, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()

    def get(self, user_id: int) -> tuple[Role, ...]:
        """
        Return the roles of `user_id`, asking the store on a miss.

        Store errors propagate and leave the cache untouched. An answer
        fetched across a concurrent `remove` or `clear` is returned but not
        stored, since it may predate the mutation.
        """

        with self._lock:
            cached = self._entries.get(user_id)
            stamp = (self._epoch, self._generations.get(user_id, 0))
        if cached is not None:
            return cached

        logger.debug("Roles cache miss user_id=%s", user_id)
        roles = tuple(self._store.list_roles_for_user(user_id))

        with self._lock:
            if (self._epoch, self._generations.get(user_id, 0)) == stamp:
                self._entries[user_id] = roles
            else:
                logger.debug("Roles cache invalidated during fetch user_id=%s", user_id)
        return roles

    def contains(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._entries

    def remove(self, user_id: int) -> None:
        with self._lock:
            removed = self._entries.pop(user_id, None)
            self._generations[user_id] = self._generations.get(user_id, 0) + 1
        if removed is not None:
            logger.debug("Roles cache entry removed user_id=%s", user_id)

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1
        logger.info("Roles cache cleared entries=%s", count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
