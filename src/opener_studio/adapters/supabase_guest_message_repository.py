"""Supabase-backed guest message repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from opener_studio.domain.messages import GuestSavedMessage
from opener_studio.services.message_selection import GuestMessageRepository

_COLUMNS = "id, session_id, guest_contact_id, version_name, message_text, is_selected"


@dataclass
class SupabaseGuestMessageRepository(GuestMessageRepository):
    """Supabase implementation for the guest_saved_messages table."""

    client: Client

    def create_messages(
        self,
        session_id: str,
        guest_contact_id: str | None,
        messages: list[tuple[str, str]],
    ) -> list[GuestSavedMessage]:
        """Insert one row per message version and return them."""
        response = (
            self.client.table("guest_saved_messages")
            .insert(
                [
                    {
                        "session_id": session_id,
                        "guest_contact_id": guest_contact_id,
                        "version_name": version_name,
                        "message_text": text,
                        "is_selected": False,
                    }
                    for version_name, text in messages
                ]
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save guest messages")
        return [_to_message(row) for row in response.data]

    def unselect_all(self, session_id: str) -> None:
        """Clear the selected flag for every message in the session."""
        self.client.table("guest_saved_messages").update({"is_selected": False}).eq(
            "session_id", session_id
        ).execute()

    def find_latest(
        self, session_id: str, version_name: str, guest_contact_id: str | None
    ) -> GuestSavedMessage | None:
        """Return the most recently created message for the version."""
        query = (
            self.client.table("guest_saved_messages")
            .select(_COLUMNS)
            .eq("session_id", session_id)
            .eq("version_name", version_name)
        )
        if guest_contact_id:
            query = query.eq("guest_contact_id", guest_contact_id)
        response = query.order("created_at", desc=True).limit(1).execute()
        if not response.data:
            return None
        return _to_message(response.data[0])

    def mark_selected(self, message_id: UUID) -> None:
        """Flag a single message as selected."""
        self.client.table("guest_saved_messages").update(
            {
                "is_selected": True,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(message_id)).execute()


def _to_message(row: dict[str, object]) -> GuestSavedMessage:
    guest_contact_id = row.get("guest_contact_id")
    return GuestSavedMessage(
        id=UUID(str(row["id"])),
        session_id=str(row["session_id"]),
        guest_contact_id=str(guest_contact_id) if guest_contact_id else None,
        version_name=str(row["version_name"]),
        message_text=str(row["message_text"]),
        is_selected=bool(row.get("is_selected", False)),
    )
