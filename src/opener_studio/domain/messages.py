"""Domain models for stored guest messages."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class GuestSavedMessage:
    """Represents a generated message row saved for a guest session."""

    id: UUID
    session_id: str
    guest_contact_id: str | None
    version_name: str
    message_text: str
    is_selected: bool


@dataclass(frozen=True)
class SelectionSyncRequest:
    """Payload mirrored to the remote selection store."""

    session_id: str
    selected_message: str
    selected_version: str
    guest_contact_id: str | None = None

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body expected by the selection endpoint."""
        payload = {
            "sessionId": self.session_id,
            "selectedMessage": self.selected_message,
            "selectedVersion": self.selected_version,
        }
        if self.guest_contact_id:
            payload["guestContactId"] = self.guest_contact_id
        return payload
