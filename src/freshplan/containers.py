"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date

from supabase import create_client

from freshplan.adapters.supabase_sync_adapter import SupabaseSyncAdapter
from freshplan.config import Settings, current_time
from freshplan.services.sessions import SessionRegistry


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_registry: SessionRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )

    def today() -> date:
        return current_time(resolved_settings.timezone).date()

    session_registry = SessionRegistry(
        adapter_factory=lambda user_id: SupabaseSyncAdapter(supabase_client, user_id),
        today=today,
    )

    async def close_resources() -> None:
        session_registry.close_all()

    return AppContainer(
        settings=resolved_settings,
        session_registry=session_registry,
        close_resources=close_resources,
    )
