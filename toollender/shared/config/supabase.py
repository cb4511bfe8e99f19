# 📄 File: toollender/shared/config/supabase.py
# 🧭 Purpose (Layman Explanation):
# Sets up the connection to Supabase, the online service that holds ToolLender's
# shared data, sign-ins and tool pictures.
# 🧪 Purpose (Technical Summary):
# Lazily constructed Supabase client manager exposing the table, auth and storage
# sub-clients used by the remote store, identity and blob storage adapters.
# 🔗 Dependencies:
# supabase, toollender.shared.config.settings
# 🔄 Connected Modules / Calls From:
# remote_store/supabase_store.py, storage/supabase_storage.py,
# modules/tool_lending/infrastructure/external/supabase_identity.py, container

import logging
from typing import Optional

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from toollender.shared.core.exceptions import ConfigurationError
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager with lazy initialization.
    Provides authentication, table and storage sub-clients.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._client: Optional[Client] = None
        self.settings = settings or get_settings()

    @property
    def client(self) -> Client:
        """Get or create Supabase client with lazy initialization."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> Client:
        """Create Supabase client with proper configuration."""
        if not self.settings.SUPABASE_URL or not self.settings.SUPABASE_ANON_KEY:
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_ANON_KEY must be set for the supabase backend",
                setting="SUPABASE_URL"
            )

        try:
            client_options = ClientOptions(
                schema="public",
                headers={
                    "User-Agent": f"ToolLender/{self.settings.APP_VERSION}",
                },
                auto_refresh_token=True,
                persist_session=True,
            )

            client = create_client(
                supabase_url=self.settings.SUPABASE_URL,
                supabase_key=self.settings.SUPABASE_ANON_KEY,
                options=client_options
            )

            logger.info("Supabase client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConfigurationError(f"Supabase initialization failed: {e}") from e

    def get_auth_client(self):
        """Get Supabase auth client for authentication operations."""
        return self.client.auth

    def get_storage_client(self, bucket_name: Optional[str] = None):
        """
        Get Supabase storage client for file operations.

        Args:
            bucket_name: Storage bucket name (default: SUPABASE_STORAGE_BUCKET)
        """
        return self.client.storage.from_(bucket_name or self.settings.SUPABASE_STORAGE_BUCKET)

    def table(self, name: str):
        """Get a query builder for a table."""
        return self.client.table(name)

    def close(self):
        """Drop the cached client."""
        if self._client:
            self._client = None
            logger.info("Supabase client connections closed")
