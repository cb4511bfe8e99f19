# 📄 File: toollender/container.py
#
# 🧭 Purpose (Layman Explanation):
# Puts all the pieces of ToolLender together: which online database to use, where
# to keep the offline copy, and which helpers get which connections. It also starts
# and stops everything in the right order.
#
# 🧪 Purpose (Technical Summary):
# Composition root. Builds the remote store adapter, Local Store backend, cache
# synchronizer, repositories, application services and connectivity monitor from
# Settings (or injected collaborators), registers the reconnect refresh, and owns
# the start/shutdown lifecycle.
#
# 🔗 Dependencies:
# - toollender.shared (config, infrastructure, logging)
# - toollender.modules.tool_lending (repositories, services)
#
# 🔄 Connected Modules / Calls From:
# - Application entry points, tests

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional

from toollender.shared.config.settings import Settings, get_settings
from toollender.shared.core.exceptions import ConfigurationError
from toollender.shared.infrastructure.cache.local_store import FileLocalStore, LocalStore
from toollender.shared.infrastructure.cache.synchronizer import CacheSynchronizer
from toollender.shared.infrastructure.connectivity.monitor import ConnectivityMonitor
from toollender.shared.infrastructure.connectivity.probe import ReachabilityProbe
from toollender.shared.infrastructure.remote_store.base import ReadMode, RemoteStoreClient
from toollender.shared.infrastructure.remote_store.memory_store import InMemoryRemoteStoreClient
from toollender.shared.infrastructure.storage.base import BlobStorage
from toollender.shared.utils.logging import (
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)
from toollender.modules.tool_lending.application.services.account_service import AccountService
from toollender.modules.tool_lending.application.services.tool_upload_service import ToolUploadService
from toollender.modules.tool_lending.domain.services.identity_provider import IdentityProvider
from toollender.modules.tool_lending.infrastructure.repositories.association_repository_impl import (
    AssociationRepositoryImpl,
)
from toollender.modules.tool_lending.infrastructure.repositories.tool_repository_impl import ToolRepositoryImpl
from toollender.modules.tool_lending.infrastructure.repositories.user_repository_impl import UserRepositoryImpl

logger = get_logger(__name__)

RECONNECT_REFRESH_KEY = "reconnect:tools"


class ServiceContainer:
    """
    Holds the wired ToolLender object graph.

    Repositories are constructed once per container; there are no module
    level singletons, so tests build as many containers as they need.
    """

    def __init__(
        self,
        settings: Settings,
        remote: RemoteStoreClient,
        local_store: LocalStore,
        identity: Optional[IdentityProvider] = None,
        storage: Optional[BlobStorage] = None,
        probe: Optional[ReachabilityProbe] = None,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.settings = settings
        self.remote = remote
        self.local_store = local_store
        self.identity = identity
        self.storage = storage
        self._on_close = on_close

        self.synchronizer = CacheSynchronizer()
        self.tool_repository = ToolRepositoryImpl(
            remote, local_store, self.synchronizer, settings.TOOLS_COLLECTION
        )
        self.user_repository = UserRepositoryImpl(
            remote, local_store, self.synchronizer, settings.USERS_COLLECTION
        )
        self.association_repository = AssociationRepositoryImpl(
            remote, local_store, self.synchronizer, settings.ASSOCIATIONS_COLLECTION
        )
        self.monitor = ConnectivityMonitor(probe=probe)
        self._remove_reconnect_listener: Optional[Callable[[], None]] = None

    @property
    def account_service(self) -> AccountService:
        if self.identity is None:
            raise ConfigurationError("No identity provider configured", setting="REMOTE_STORE_BACKEND")
        return AccountService(self.identity, self.user_repository)

    @property
    def tool_upload_service(self) -> ToolUploadService:
        if self.storage is None:
            raise ConfigurationError("No blob storage configured", setting="SUPABASE_STORAGE_BUCKET")
        return ToolUploadService(self.tool_repository, self.storage)

    def _on_connectivity_change(self, online: bool) -> None:
        if not online:
            logger.info("Offline, serving cached data")
            return
        logger.info("Connection restored, reloading tools")
        self.synchronizer.schedule(
            RECONNECT_REFRESH_KEY,
            lambda: self.tool_repository.fetch_all(ReadMode.SERVER),
        )

    async def start(self, configure_logging: bool = True) -> None:
        """Configure logging, register the reconnect refresh and start monitoring."""
        if configure_logging:
            setup_logging()
        log_startup_event(
            self.settings.APP_NAME,
            self.settings.APP_VERSION,
            extra={
                "remote_store_backend": self.settings.REMOTE_STORE_BACKEND,
                "local_store_backend": self.settings.LOCAL_STORE_BACKEND,
            },
        )
        if self._remove_reconnect_listener is None:
            self._remove_reconnect_listener = self.monitor.add_listener(self._on_connectivity_change)
        await self.monitor.start()

    async def shutdown(self, cancel_refreshes: bool = False) -> None:
        """Stop monitoring, finish background refreshes and close clients."""
        log_shutdown_event(self.settings.APP_NAME)
        try:
            await self.monitor.stop()
            if self._remove_reconnect_listener is not None:
                self._remove_reconnect_listener()
                self._remove_reconnect_listener = None
            await self.synchronizer.shutdown(cancel=cancel_refreshes)
        finally:
            await self.remote.close()
            if self._on_close is not None:
                self._on_close()
        logger.info("ToolLender shutdown complete")


def _build_remote(settings: Settings):
    if settings.REMOTE_STORE_BACKEND == "memory":
        return InMemoryRemoteStoreClient(), None, None, None

    from toollender.shared.config.supabase import SupabaseManager
    from toollender.shared.infrastructure.remote_store.supabase_store import SupabaseRemoteStoreClient
    from toollender.shared.infrastructure.storage.supabase_storage import SupabaseBlobStorage
    from toollender.modules.tool_lending.infrastructure.external.supabase_identity import (
        SupabaseIdentityProvider,
    )

    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise ConfigurationError(
            "SUPABASE_URL and SUPABASE_ANON_KEY must be set for the supabase backend",
            setting="SUPABASE_URL",
        )
    manager = SupabaseManager(settings)
    return (
        SupabaseRemoteStoreClient(manager),
        SupabaseIdentityProvider(manager),
        SupabaseBlobStorage(manager),
        manager,
    )


def _build_local_store(settings: Settings):
    if settings.LOCAL_STORE_BACKEND == "redis":
        from toollender.shared.config.redis import RedisConfig
        from toollender.shared.infrastructure.cache.redis_store import RedisLocalStore

        redis_config = RedisConfig(settings)
        store = RedisLocalStore(redis_config.create_redis_client(), prefix=settings.REDIS_KEY_PREFIX)
        return store, redis_config.close_connections

    return FileLocalStore(settings.LOCAL_CACHE_DIR), None


def build_container(
    settings: Optional[Settings] = None,
    remote: Optional[RemoteStoreClient] = None,
    local_store: Optional[LocalStore] = None,
    identity: Optional[IdentityProvider] = None,
    storage: Optional[BlobStorage] = None,
    probe: Optional[ReachabilityProbe] = None,
) -> ServiceContainer:
    """
    Build a container from settings, using any collaborators passed in.

    Args:
        settings: Settings to use (default: get_settings())
        remote: Remote store client overriding REMOTE_STORE_BACKEND
        local_store: Local Store overriding LOCAL_STORE_BACKEND
        identity: Identity provider overriding the Supabase one
        storage: Blob storage overriding the Supabase one
        probe: Reachability probe; one is built from CONNECTIVITY_PROBE_URL
            (or SUPABASE_URL) when omitted and a URL is configured

    Raises:
        ConfigurationError: If the selected backends cannot be built
    """
    settings = settings or get_settings()

    if remote is None:
        remote, default_identity, default_storage, _ = _build_remote(settings)
        identity = identity or default_identity
        storage = storage or default_storage

    on_close = None
    if local_store is None:
        local_store, on_close = _build_local_store(settings)

    if probe is None and settings.probe_url:
        probe = ReachabilityProbe(
            settings.probe_url,
            interval=settings.CONNECTIVITY_PROBE_INTERVAL,
            timeout=settings.CONNECTIVITY_PROBE_TIMEOUT,
        )

    return ServiceContainer(
        settings=settings,
        remote=remote,
        local_store=local_store,
        identity=identity,
        storage=storage,
        probe=probe,
        on_close=on_close,
    )


@asynccontextmanager
async def lifespan(container: ServiceContainer) -> AsyncGenerator[ServiceContainer, None]:
    """Run ``container`` between start() and shutdown()."""
    await container.start()
    try:
        yield container
    finally:
        await container.shutdown()
