# 📄 File: toollender/modules/tool_lending/application/services/account_service.py
# 🧭 Purpose (Layman Explanation):
# Handles member accounts: signing up with a profile, signing in, closing an account,
# and looking up a tool owner's contact details.
# 🧪 Purpose (Technical Summary):
# Application service coordinating the IdentityProvider port and the UserRepository.
# Account deletion removes the profile document first, then the identity when it is
# the signed-in one; the user's tools are not cascaded.
# 🔗 Dependencies:
# domain repositories and services, shared logging
# 🔄 Connected Modules / Calls From:
# toollender.container, UI adapters, tests

from typing import Optional

from toollender.shared.core.exceptions import ValidationError
from toollender.shared.infrastructure.remote_store.base import ReadMode
from toollender.shared.utils.logging import get_logger, log_context
from toollender.modules.tool_lending.domain.models.tool import Tool
from toollender.modules.tool_lending.domain.models.user_profile import UserProfile
from toollender.modules.tool_lending.domain.repositories.user_repository import UserRepository
from toollender.modules.tool_lending.domain.services.identity_provider import IdentityProvider

logger = get_logger(__name__)


class AccountService:
    """
    Application service for member accounts.

    Business rules:
    - A profile lives at the identity's subject id
    - Deleting an account leaves the member's tools in place
    - Contact lookups never fail because the server is unreachable
    """

    def __init__(self, identity: IdentityProvider, users: UserRepository):
        self.identity = identity
        self.users = users

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        association_id: str,
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> UserProfile:
        """
        Create an identity and its profile.

        Args:
            email: Login email, also stored on the profile
            password: Login password
            name: Display name
            association_id: Association the member belongs to

        Returns:
            The stored profile

        Raises:
            ValidationError: If email, password or name is blank (nothing is created)
            AuthenticationError: If the identity provider refuses the registration
        """
        for field, value in (("email", email), ("password", password), ("name", name)):
            if not (value or "").strip():
                raise ValidationError(f"{field} cannot be blank", field=field, constraint="not_blank")

        subject = await self.identity.sign_up(email.strip(), password)
        with log_context(user_id=subject.id):
            profile = await self.users.create(
                subject.id,
                name=name,
                email=email,
                association_id=association_id,
                phone_number=phone_number,
                address=address,
            )
            logger.log_business_event("account_registered", "Account registered", entity_id=subject.id, entity_type="user")
        return profile

    async def sign_in(self, email: str, password: str) -> UserProfile:
        """Sign in and load the member's profile (placeholder if offline)."""
        subject = await self.identity.sign_in(email, password)
        return await self.users.fetch_one(subject.id, ReadMode.CACHE)

    async def current_profile(self) -> Optional[UserProfile]:
        subject = await self.identity.current_subject()
        if subject is None:
            return None
        return await self.users.fetch_one(subject.id, ReadMode.CACHE)

    async def delete_account(self, user_id: str) -> None:
        """
        Delete a member's profile, then their identity if they are signed in.

        Tools owned by the member are not deleted.
        """
        with log_context(user_id=user_id):
            await self.users.delete(user_id)

            subject = await self.identity.current_subject()
            if subject is not None and subject.id == user_id:
                await self.identity.delete_current_subject()
                logger.info("Identity deleted with account")

            logger.log_business_event("account_deleted", "Account deleted", entity_id=user_id, entity_type="user")

    async def owner_contact(self, tool: Tool) -> UserProfile:
        """Profile of the tool's owner, for contact details."""
        return await self.users.fetch_one(tool.owner_id, ReadMode.CACHE)
