"""Anonymous guest identity persistence."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from opener_studio.services.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

GUEST_SESSION_KEY = "guest_session_id"
GUEST_SELECTED_MESSAGE_KEY = "guest_selected_message"


def _new_session_id() -> str:
    return str(uuid4())


@dataclass
class SessionIdentityStore:
    """Owns the single durable anonymous identifier for a storage.

    When the storage is unavailable the identifier is kept in memory only and
    will not survive a restart.
    """

    storage: KeyValueStorage
    id_factory: Callable[[], str] = _new_session_id
    _cached_id: str | None = field(default=None, init=False, repr=False)
    _unpersisted: bool = field(default=False, init=False, repr=False)

    def get_session_id(self) -> str:
        """Return the stored session id, minting and persisting one if absent."""
        try:
            existing = self.storage.get(GUEST_SESSION_KEY)
        except StorageError:
            logger.warning("Guest storage unavailable, using in-memory session id")
            if self._cached_id is None:
                self._cached_id = self.id_factory()
                self._unpersisted = True
            return self._cached_id

        if existing:
            self._cached_id = existing
            self._unpersisted = False
            return existing

        # An id that never reached storage is kept until a write succeeds.
        if not (self._unpersisted and self._cached_id):
            self._cached_id = self.id_factory()
        session_id = self._cached_id
        try:
            self.storage.set(GUEST_SESSION_KEY, session_id)
        except StorageError:
            logger.warning("Could not persist guest session id %s", session_id)
            self._unpersisted = True
        else:
            self._unpersisted = False
            logger.info("Created guest session %s", session_id)
        return session_id

    @property
    def cached_session_id(self) -> str | None:
        """Return the last id handed out, without touching storage."""
        return self._cached_id

    def clear(self) -> None:
        """Remove the stored id and its selection record."""
        self._cached_id = None
        self._unpersisted = False
        for key in (GUEST_SESSION_KEY, GUEST_SELECTED_MESSAGE_KEY):
            try:
                self.storage.remove(key)
            except StorageError:
                logger.warning("Could not remove %s from guest storage", key)
