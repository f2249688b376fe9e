"""Request and response payloads for the guest API."""

from pydantic import BaseModel, ConfigDict, Field

from opener_studio.domain.messages import SelectionSyncRequest
from opener_studio.services.message_generation import (
    MAX_CHARS_ADDITIONAL_CONTEXT,
    MAX_CHARS_OBJECTIVE,
)


class MessageSelectionPayload(BaseModel):
    """Body of a message selection update."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    selected_message: str = Field(alias="selectedMessage", min_length=1)
    selected_version: str = Field(alias="selectedVersion", min_length=1)
    guest_contact_id: str | None = Field(default=None, alias="guestContactId")

    def to_request(self) -> SelectionSyncRequest:
        return SelectionSyncRequest(
            session_id=self.session_id,
            selected_message=self.selected_message,
            selected_version=self.selected_version,
            guest_contact_id=self.guest_contact_id or None,
        )


class MessageGenerationPayload(BaseModel):
    """Body of a guest message generation request."""

    session_id: str = Field(min_length=1)
    guest_contact_id: str | None = None
    medium: str = Field(min_length=1)
    objective: str = Field(min_length=1, max_length=MAX_CHARS_OBJECTIVE)
    additional_context: str | None = Field(
        default=None, max_length=MAX_CHARS_ADDITIONAL_CONTEXT
    )
    user_summary: dict[str, object] | None = None
    contact: dict[str, object] | None = None


class GuestLinkPayload(BaseModel):
    """Body of a guest-to-account link request."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    user_id: str = Field(alias="userId", min_length=1)
