"""Domain models for guest sessions."""

from dataclasses import dataclass, replace

from pydantic import BaseModel, ConfigDict

VERSION_LABELS = ("Version 1", "Version 2", "Version 3")
DEFAULT_VERSION = VERSION_LABELS[0]


class GeneratedMessages(BaseModel):
    """The three candidate messages produced by one generation call."""

    model_config = ConfigDict(frozen=True)

    version1: str
    version2: str
    version3: str

    def labelled(self) -> list[tuple[str, str]]:
        """Return (version label, text) pairs in display order."""
        texts = (self.version1, self.version2, self.version3)
        return list(zip(VERSION_LABELS, texts, strict=True))


@dataclass(frozen=True)
class SelectedMessage:
    """A chosen message variant and its version label."""

    message: str
    version: str


@dataclass(frozen=True)
class GuestSessionData:
    """In-memory view of a guest's progress.

    Only ``session_id`` and the selection survive a restart; the other fields
    are held in memory for the lifetime of a context.
    """

    session_id: str
    user_profile: object | None = None
    user_summary: object | None = None
    guest_contact: object | None = None
    generated_messages: GeneratedMessages | None = None
    selected_message: str | None = None
    selected_version: str | None = None

    @property
    def selection(self) -> SelectedMessage | None:
        if self.selected_message is None or self.selected_version is None:
            return None
        return SelectedMessage(
            message=self.selected_message, version=self.selected_version
        )

    def with_selection(self, selection: SelectedMessage | None) -> "GuestSessionData":
        """Return a copy with both selection fields set or both cleared."""
        if selection is None:
            return replace(self, selected_message=None, selected_version=None)
        return replace(
            self,
            selected_message=selection.message,
            selected_version=selection.version,
        )

    @property
    def guest_contact_id(self) -> str | None:
        """Return the contact id when the contact payload carries one."""
        contact = self.guest_contact
        if isinstance(contact, dict):
            value = contact.get("id")
        else:
            value = getattr(contact, "id", None)
        return str(value) if value else None
