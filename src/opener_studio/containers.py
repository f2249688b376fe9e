"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from opener_studio.adapters.file_storage import JsonFileStorage
from opener_studio.adapters.openai_message_client import OpenAIMessageClient
from opener_studio.adapters.selection_sync_client import HttpxSelectionSyncClient
from opener_studio.adapters.supabase_guest_message_repository import (
    SupabaseGuestMessageRepository,
)
from opener_studio.adapters.supabase_guest_profile_repository import (
    SupabaseGuestProfileRepository,
)
from opener_studio.app_logging import configure_logging
from opener_studio.config import Settings, resolve_functions_base_url
from opener_studio.services.guest_context import GuestSessionContext
from opener_studio.services.guest_linking import GuestLinkService
from opener_studio.services.guest_sessions import GuestSessionManager
from opener_studio.services.message_generation import MessageGenerationService
from opener_studio.services.message_selection import MessageSelectionService
from opener_studio.services.notifications import LoggingNotifier, Notifier
from opener_studio.services.storage import KeyValueStorage


@dataclass
class AppContainer:
    """Holds server-side dependencies."""

    settings: Settings
    message_selection_service: MessageSelectionService
    message_generation_service: MessageGenerationService
    guest_link_service: GuestLinkService
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class GuestSessionContainer:
    """Holds the guest session services for one client process."""

    storage: KeyValueStorage
    manager: GuestSessionManager
    context: GuestSessionContext
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default server dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    message_repository = SupabaseGuestMessageRepository(supabase_client)
    openai_client = OpenAIMessageClient.create(resolved_settings.openai_api_key)
    message_generation_service = MessageGenerationService(
        client=openai_client,
        repository=message_repository,
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        message_selection_service=MessageSelectionService(message_repository),
        message_generation_service=message_generation_service,
        guest_link_service=GuestLinkService(
            SupabaseGuestProfileRepository(supabase_client)
        ),
        close_resources=close_resources,
    )


def build_guest_session(
    settings: Settings | None = None,
    storage: KeyValueStorage | None = None,
    notifier: Notifier | None = None,
) -> GuestSessionContainer:
    """Create the guest session services over durable storage."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    resolved_storage = storage or JsonFileStorage.create(
        resolved_settings.guest_storage_path
    )
    manager = GuestSessionManager.create(resolved_storage)
    sync_client = HttpxSelectionSyncClient.create(
        base_url=resolve_functions_base_url(resolved_settings),
        api_key=resolved_settings.supabase_anon_key
        or resolved_settings.supabase_service_key,
    )
    context = GuestSessionContext(
        manager=manager,
        sync_client=sync_client,
        notifier=notifier or LoggingNotifier(),
    )
    context.attach()

    async def close_resources() -> None:
        context.detach()
        await sync_client.close()

    return GuestSessionContainer(
        storage=resolved_storage,
        manager=manager,
        context=context,
        close_resources=close_resources,
    )
