from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Optional

from incident_hub.models.profile import Profile

logger = logging.getLogger(__name__)


class ProfileCache:
    """
    In-process cache of authenticated profiles, keyed by principal id.

    Invalidation: `clear` on sign-out, `put` again after every profile
    mutation. Entries never expire on their own.
    """

    def __init__(self):
        self._items: Dict[str, Profile] = {}
        self._lock = Lock()

    def get(self, principal_id: str) -> Optional[Profile]:
        with self._lock:
            return self._items.get(principal_id)

    def put(self, profile: Profile) -> None:
        with self._lock:
            self._items[profile.id] = profile

    def clear(self, principal_id: str) -> None:
        with self._lock:
            if self._items.pop(principal_id, None) is not None:
                logger.debug("Profile cache cleared for %s", principal_id)


profile_cache = ProfileCache()
