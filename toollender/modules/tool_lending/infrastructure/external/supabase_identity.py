# 📄 File: toollender/modules/tool_lending/infrastructure/external/supabase_identity.py
# 🧭 Purpose (Layman Explanation):
# Connects ToolLender's sign-in needs to Supabase's login service.
# 🧪 Purpose (Technical Summary):
# IdentityProvider adapter over the Supabase auth client. Blocking calls run in
# worker threads; provider failures become AuthenticationError. Account deletion
# calls a database function because the anonymous key cannot use the admin API.
# 🔗 Dependencies:
# supabase (via SupabaseManager), asyncio
# 🔄 Connected Modules / Calls From:
# toollender.container, account_service.py

import asyncio
import logging
from typing import Optional

from toollender.shared.config.supabase import SupabaseManager
from toollender.shared.core.exceptions import AuthenticationError
from toollender.modules.tool_lending.domain.services.identity_provider import (
    AuthSubject,
    IdentityProvider,
)

logger = logging.getLogger(__name__)

# Postgres function deleting auth.users row of the calling user
DELETE_SELF_FUNCTION = "delete_current_user"


class SupabaseIdentityProvider(IdentityProvider):
    """Supabase auth implementation of the IdentityProvider port."""

    def __init__(self, manager: SupabaseManager):
        self.manager = manager

    @property
    def auth(self):
        return self.manager.get_auth_client()

    async def current_subject(self) -> Optional[AuthSubject]:
        try:
            response = await asyncio.to_thread(self.auth.get_user)
        except Exception as e:
            logger.debug(f"No current Supabase user: {e}")
            return None
        if response is None or response.user is None:
            return None
        return AuthSubject(id=response.user.id, email=response.user.email)

    async def sign_in(self, email: str, password: str) -> AuthSubject:
        try:
            response = await asyncio.to_thread(
                self.auth.sign_in_with_password,
                {"email": email, "password": password},
            )
        except Exception as e:
            logger.warning(f"Sign-in failed for {email}: {e}")
            raise AuthenticationError(f"Sign-in failed: {e}") from e

        if response.user is None:
            raise AuthenticationError("Sign-in returned no user")
        logger.info(f"User signed in: {response.user.id}")
        return AuthSubject(id=response.user.id, email=response.user.email)

    async def sign_up(self, email: str, password: str) -> AuthSubject:
        try:
            response = await asyncio.to_thread(
                self.auth.sign_up,
                {"email": email, "password": password},
            )
        except Exception as e:
            logger.warning(f"Sign-up failed for {email}: {e}")
            raise AuthenticationError(f"Sign-up failed: {e}") from e

        if response.user is None:
            raise AuthenticationError("Sign-up returned no user")
        logger.info(f"User registered: {response.user.id}")
        return AuthSubject(id=response.user.id, email=response.user.email)

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self.auth.sign_out)
        except Exception as e:
            raise AuthenticationError(f"Sign-out failed: {e}") from e

    async def delete_current_subject(self) -> None:
        subject = await self.current_subject()
        if subject is None:
            raise AuthenticationError("No user is signed in")

        try:
            await asyncio.to_thread(lambda: self.manager.client.rpc(DELETE_SELF_FUNCTION).execute())
            await asyncio.to_thread(self.auth.sign_out)
        except Exception as e:
            raise AuthenticationError(f"Account deletion failed: {e}", user_id=subject.id) from e

        logger.info(f"Auth user deleted: {subject.id}")
