"""Server-side bookkeeping for which guest message is selected."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from opener_studio.domain.messages import GuestSavedMessage, SelectionSyncRequest

logger = logging.getLogger(__name__)


class MessageNotFoundError(Exception):
    """Raised when no stored message matches a selection request."""


class GuestMessageRepository(Protocol):
    """Persistence interface for guest saved messages."""

    def create_messages(
        self,
        session_id: str,
        guest_contact_id: str | None,
        messages: list[tuple[str, str]],
    ) -> list[GuestSavedMessage]:
        """Store (version name, text) pairs and return the created rows."""

    def unselect_all(self, session_id: str) -> None:
        """Clear the selected flag on every message of a session."""

    def find_latest(
        self, session_id: str, version_name: str, guest_contact_id: str | None
    ) -> GuestSavedMessage | None:
        """Return the newest message matching the version, if present."""

    def mark_selected(self, message_id: UUID) -> None:
        """Flag a single message as selected."""


@dataclass
class MessageSelectionService:
    """Keeps exactly one selected message per guest session."""

    repository: GuestMessageRepository

    def update_selection(self, request: SelectionSyncRequest) -> GuestSavedMessage:
        """Select the newest stored message for the requested version."""
        logger.info(
            "Updating message selection for session %s, version %s",
            request.session_id,
            request.selected_version,
        )
        self.repository.unselect_all(request.session_id)
        latest = self.repository.find_latest(
            request.session_id, request.selected_version, request.guest_contact_id
        )
        if latest is None:
            raise MessageNotFoundError(
                f"No {request.selected_version} message for session "
                f"{request.session_id}"
            )
        self.repository.mark_selected(latest.id)
        return latest
