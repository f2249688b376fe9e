"""Reactive guest session state for the UI layer."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Protocol

from opener_studio.domain.guest import (
    DEFAULT_VERSION,
    GeneratedMessages,
    GuestSessionData,
    SelectedMessage,
)
from opener_studio.domain.messages import SelectionSyncRequest
from opener_studio.services.guest_sessions import GuestSessionManager
from opener_studio.services.identity import (
    GUEST_SELECTED_MESSAGE_KEY,
    GUEST_SESSION_KEY,
)
from opener_studio.services.notifications import Notifier
from opener_studio.services.storage import supports_external_changes

logger = logging.getLogger(__name__)

SessionListener = Callable[[GuestSessionData], None]

SELECTION_SYNC_FAILED = "Failed to save message selection"


class SelectionSyncError(Exception):
    """Raised when the remote selection mirror rejects or misses a call."""


class SelectionSyncClient(Protocol):
    """Interface for mirroring message selection to remote storage."""

    async def sync_selection(self, request: SelectionSyncRequest) -> None:
        """Record the selected message variant remotely."""


@dataclass
class GuestSessionContext:
    """Owns the in-memory guest session for the current process.

    Local state is the source of truth. Selection changes are written to
    storage before the remote mirror is called, and a failed remote call
    never rolls them back.
    """

    manager: GuestSessionManager
    sync_client: SelectionSyncClient
    notifier: Notifier
    _data: GuestSessionData = field(init=False)
    _listeners: list[SessionListener] = field(default_factory=list, init=False)
    _detach: Callable[[], None] | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self._data = self.manager.get_session_data()

    @property
    def session_data(self) -> GuestSessionData:
        return self._data

    @property
    def is_profile_complete(self) -> bool:
        return bool(self._data.user_profile and self._data.user_summary)

    @property
    def is_contact_complete(self) -> bool:
        return bool(self._data.guest_contact)

    @property
    def is_message_generation_unlocked(self) -> bool:
        return self.is_profile_complete and self.is_contact_complete

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener called with the new state after each change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update_user_profile(self, profile: object, summary: object) -> None:
        """Store the guest's profile and summary in memory."""
        self._set(replace(self._data, user_profile=profile, user_summary=summary))

    def update_guest_contact(self, contact: object) -> None:
        """Store the contact the guest is writing to in memory."""
        self._set(replace(self._data, guest_contact=contact))

    def update_generated_messages(
        self, messages: GeneratedMessages | Mapping[str, str]
    ) -> None:
        """Store generated messages and select the first version."""
        generated = GeneratedMessages.model_validate(messages)
        default = SelectedMessage(message=generated.version1, version=DEFAULT_VERSION)
        self.manager.set_selected_message(default.message, default.version)
        self._set(
            replace(self._data, generated_messages=generated).with_selection(default)
        )

    async def select_message(self, message: str, version: str) -> None:
        """Select a message locally, then mirror the choice remotely."""
        self.manager.set_selected_message(message, version)
        self._set(
            self._data.with_selection(SelectedMessage(message=message, version=version))
        )
        request = SelectionSyncRequest(
            session_id=self._data.session_id,
            selected_message=message,
            selected_version=version,
            guest_contact_id=self._data.guest_contact_id,
        )
        try:
            await self.sync_client.sync_selection(request)
        except Exception:
            logger.exception(
                "Failed to sync message selection for session %s", request.session_id
            )
            self.notifier.error(SELECTION_SYNC_FAILED)

    def clear_session(self) -> None:
        """Forget the current guest and start a fresh session."""
        self.manager.clear_session()
        self._set(GuestSessionData(session_id=self.manager.get_session_id()))

    def attach(self) -> bool:
        """Listen for guest keys changed by another process, if supported."""
        storage = self.manager.storage
        if self._detach is not None or not supports_external_changes(storage):
            return self._detach is not None
        self._detach = storage.on_external_change(self.handle_external_change)
        return True

    def detach(self) -> None:
        """Stop listening for external storage changes."""
        if self._detach is not None:
            self._detach()
            self._detach = None

    def handle_external_change(self, key: str) -> None:
        """Reload persisted fields after a write made elsewhere."""
        if key not in {GUEST_SESSION_KEY, GUEST_SELECTED_MESSAGE_KEY}:
            return
        persisted = self.manager.get_session_data()
        if persisted.session_id != self._data.session_id:
            logger.info(
                "Guest session changed externally from %s to %s",
                self._data.session_id,
                persisted.session_id,
            )
            self._set(persisted)
            return
        self._set(self._data.with_selection(persisted.selection))

    def _set(self, data: GuestSessionData) -> None:
        self._data = data
        for listener in list(self._listeners):
            listener(data)
