"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

import pytest

from opener_studio.config import Settings
from opener_studio.containers import AppContainer
from opener_studio.domain.messages import GuestSavedMessage, SelectionSyncRequest
from opener_studio.domain.profiles import SUMMARY_FIELDS, ProfileContent
from opener_studio.services.guest_context import (
    GuestSessionContext,
    SelectionSyncClient,
    SelectionSyncError,
)
from opener_studio.services.guest_linking import (
    GuestLinkService,
    GuestProfileRepository,
)
from opener_studio.services.guest_sessions import GuestSessionManager
from opener_studio.services.message_generation import (
    MessageGenerationClient,
    MessageGenerationService,
)
from opener_studio.services.message_selection import (
    GuestMessageRepository,
    MessageSelectionService,
)
from opener_studio.services.notifications import Notifier
from opener_studio.services.storage import (
    InMemoryStorage,
    KeyValueStorage,
    StorageError,
)


@dataclass
class UnavailableStorage(KeyValueStorage):
    """Storage that fails every call, like a blocked browser store."""

    def get(self, key: str) -> str | None:
        raise StorageError("storage disabled")

    def set(self, key: str, value: str) -> None:
        raise StorageError("storage disabled")

    def remove(self, key: str) -> None:
        raise StorageError("storage disabled")


@dataclass
class ReadOnlyStorage(InMemoryStorage):
    """Storage that can be read but rejects writes until made writable."""

    writable: bool = False

    def set(self, key: str, value: str) -> None:
        if not self.writable:
            raise StorageError("storage is read-only")
        super().set(key, value)


@dataclass
class FakeSelectionSyncClient(SelectionSyncClient):
    """Fake sync client that records requests."""

    requests: list[SelectionSyncRequest] = field(default_factory=list)

    async def sync_selection(self, request: SelectionSyncRequest) -> None:
        self.requests.append(request)


@dataclass
class FailingSelectionSyncClient(SelectionSyncClient):
    """Fake sync client whose remote call always fails."""

    attempts: int = 0

    async def sync_selection(self, request: SelectionSyncRequest) -> None:
        self.attempts += 1
        raise SelectionSyncError("500 Internal Server Error")


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that keeps notifications in memory."""

    successes: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def success(self, text: str) -> None:
        self.successes.append(text)

    def error(self, text: str) -> None:
        self.errors.append(text)


@dataclass
class FakeMessageGenerationClient(MessageGenerationClient):
    """Fake generation client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "version1": "Hi Dana, I admire the platform work at Acme.",
            "version2": "Hi Dana, we both spent years in fintech.",
            "version3": "Hi Dana, I cut deploy times by 40% and can help Acme.",
        }
    )
    prompts: list[str] = field(default_factory=list)

    async def generate(
        self,
        *,
        model: str,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload


@dataclass
class InMemoryGuestMessageRepository(GuestMessageRepository):
    """In-memory guest message repository; list order is creation order."""

    messages: list[GuestSavedMessage] = field(default_factory=list)

    def create_messages(
        self,
        session_id: str,
        guest_contact_id: str | None,
        messages: list[tuple[str, str]],
    ) -> list[GuestSavedMessage]:
        created = [
            GuestSavedMessage(
                id=uuid4(),
                session_id=session_id,
                guest_contact_id=guest_contact_id,
                version_name=version_name,
                message_text=text,
                is_selected=False,
            )
            for version_name, text in messages
        ]
        self.messages.extend(created)
        return created

    def unselect_all(self, session_id: str) -> None:
        self.messages = [
            replace(message, is_selected=False)
            if message.session_id == session_id
            else message
            for message in self.messages
        ]

    def find_latest(
        self, session_id: str, version_name: str, guest_contact_id: str | None
    ) -> GuestSavedMessage | None:
        for message in reversed(self.messages):
            if message.session_id != session_id:
                continue
            if message.version_name != version_name:
                continue
            if guest_contact_id and message.guest_contact_id != guest_contact_id:
                continue
            return message
        return None

    def mark_selected(self, message_id: UUID) -> None:
        self.messages = [
            replace(message, is_selected=True) if message.id == message_id else message
            for message in self.messages
        ]

    def selected(self, session_id: str) -> list[GuestSavedMessage]:
        return [
            message
            for message in self.messages
            if message.session_id == session_id and message.is_selected
        ]


@dataclass
class InMemoryGuestProfileRepository(GuestProfileRepository):
    """In-memory user_profiles and user_summaries rows."""

    profiles: list[dict[str, object]] = field(default_factory=list)
    summaries: list[dict[str, object]] = field(default_factory=list)
    fail_cleanup: bool = False

    def find_user_profile(self, user_id: str) -> ProfileContent | None:
        for row in self.profiles:
            if row.get("user_id") == user_id:
                return _profile_content(row)
        return None

    def find_temporary_profile(self, session_id: str) -> ProfileContent | None:
        for row in self._temporary(self.profiles, session_id):
            return _profile_content(row)
        return None

    def update_user_profile(self, user_id: str, content: ProfileContent) -> None:
        for row in self.profiles:
            if row.get("user_id") == user_id:
                row.update(vars(content), is_temporary=False, session_id=None)

    def convert_temporary_profile(self, session_id: str, user_id: str) -> None:
        for row in self._temporary(self.profiles, session_id):
            row.update(user_id=user_id, is_temporary=False)

    def delete_temporary_profiles(self, session_id: str) -> None:
        if self.fail_cleanup:
            raise RuntimeError("cleanup failed")
        leftovers = self._temporary(self.profiles, session_id)
        self.profiles = [row for row in self.profiles if row not in leftovers]

    def find_temporary_summary(self, session_id: str) -> dict[str, object] | None:
        for row in self._temporary(self.summaries, session_id):
            return {name: row.get(name) for name in SUMMARY_FIELDS}
        return None

    def find_user_summary_id(self, user_id: str) -> str | None:
        for row in self.summaries:
            if row.get("user_id") == user_id:
                return str(row["summary_id"])
        return None

    def update_user_summary(self, summary_id: str, fields: dict[str, object]) -> None:
        for row in self.summaries:
            if row.get("summary_id") == summary_id:
                row.update(fields, session_id=None)

    def convert_temporary_summary(self, session_id: str, user_id: str) -> None:
        for row in self._temporary(self.summaries, session_id):
            row.update(user_id=user_id, session_id=None)

    def delete_temporary_summaries(self, session_id: str) -> None:
        leftovers = self._temporary(self.summaries, session_id)
        self.summaries = [row for row in self.summaries if row not in leftovers]

    @staticmethod
    def _temporary(
        rows: list[dict[str, object]], session_id: str
    ) -> list[dict[str, object]]:
        return [
            row
            for row in rows
            if row.get("session_id") == session_id and row.get("user_id") is None
        ]


def _profile_content(row: dict[str, object]) -> ProfileContent:
    return ProfileContent(
        linkedin_content=row.get("linkedin_content"),  # type: ignore[arg-type]
        additional_details=row.get("additional_details"),  # type: ignore[arg-type]
        cv_content=row.get("cv_content"),  # type: ignore[arg-type]
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        supabase_anon_key="anon.payload.signature",
        openai_api_key="openai-key",
        guest_storage_path=str(tmp_path / "guest_session.json"),
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def manager(storage: InMemoryStorage) -> GuestSessionManager:
    return GuestSessionManager.create(storage)


@pytest.fixture
def sync_client() -> FakeSelectionSyncClient:
    return FakeSelectionSyncClient()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def context(
    manager: GuestSessionManager,
    sync_client: FakeSelectionSyncClient,
    notifier: RecordingNotifier,
) -> GuestSessionContext:
    return GuestSessionContext(
        manager=manager, sync_client=sync_client, notifier=notifier
    )


@pytest.fixture
def message_repository() -> InMemoryGuestMessageRepository:
    return InMemoryGuestMessageRepository()


@pytest.fixture
def generation_client() -> FakeMessageGenerationClient:
    return FakeMessageGenerationClient()


@pytest.fixture
def profile_repository() -> InMemoryGuestProfileRepository:
    return InMemoryGuestProfileRepository()


@pytest.fixture
def container(
    settings: Settings,
    message_repository: InMemoryGuestMessageRepository,
    generation_client: FakeMessageGenerationClient,
    profile_repository: InMemoryGuestProfileRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        message_selection_service=MessageSelectionService(message_repository),
        message_generation_service=MessageGenerationService(
            client=generation_client,
            repository=message_repository,
            model=settings.openai_model,
        ),
        guest_link_service=GuestLinkService(profile_repository),
        close_resources=close_resources,
    )
