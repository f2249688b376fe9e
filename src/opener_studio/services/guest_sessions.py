"""Guest session persistence manager."""

import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from opener_studio.domain.guest import GuestSessionData, SelectedMessage
from opener_studio.services.identity import (
    GUEST_SELECTED_MESSAGE_KEY,
    GUEST_SESSION_KEY,
    SessionIdentityStore,
)
from opener_studio.services.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)


class PersistedSelection(BaseModel):
    """Stored selection record, tagged with its owning session."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    version: str
    session_id: str = Field(alias="sessionId")


@dataclass
class GuestSessionManager:
    """Single authority for reading and writing guest state in storage.

    Writes are last-write-wins; concurrent writers in several tabs or
    processes are not coordinated.
    """

    identity: SessionIdentityStore
    storage: KeyValueStorage

    @classmethod
    def create(cls, storage: KeyValueStorage) -> "GuestSessionManager":
        """Create a manager with an identity store over the same storage."""
        return cls(identity=SessionIdentityStore(storage), storage=storage)

    def get_session_id(self) -> str:
        """Return the current guest session id."""
        return self.identity.get_session_id()

    def get_selected_message(self) -> SelectedMessage | None:
        """Return the persisted selection for the current session, if any."""
        try:
            raw = self.storage.get(GUEST_SELECTED_MESSAGE_KEY)
        except StorageError:
            logger.warning("Guest storage unavailable, ignoring saved selection")
            return None
        if not raw:
            return None
        try:
            record = PersistedSelection.model_validate_json(raw)
        except ValidationError:
            logger.exception("Error parsing saved message selection")
            return None
        if record.session_id != self.get_session_id():
            return None
        return SelectedMessage(message=record.message, version=record.version)

    def set_selected_message(self, message: str, version: str) -> None:
        """Persist a selection for the current session, replacing any prior one."""
        record = PersistedSelection(
            message=message, version=version, session_id=self.get_session_id()
        )
        try:
            self.storage.set(
                GUEST_SELECTED_MESSAGE_KEY, record.model_dump_json(by_alias=True)
            )
        except StorageError:
            logger.warning("Could not persist message selection for %s", version)

    def clear_session(self) -> None:
        """Forget the guest session and its saved selection."""
        self.identity.clear()

    def has_active_session(self) -> bool:
        """Return True if a session id is loaded and still stored."""
        if self.identity.cached_session_id is None:
            return False
        try:
            return bool(self.storage.get(GUEST_SESSION_KEY))
        except StorageError:
            return False

    def get_session_data(self) -> GuestSessionData:
        """Return the persisted part of the guest session."""
        session_id = self.get_session_id()
        return GuestSessionData(session_id=session_id).with_selection(
            self.get_selected_message()
        )
