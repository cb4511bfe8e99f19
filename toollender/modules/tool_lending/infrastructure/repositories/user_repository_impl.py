# 📄 File: toollender/modules/tool_lending/infrastructure/repositories/user_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Stores and loads member profiles. When the internet is down and nothing was saved,
# it still hands back a simple stand-in profile so screens keep working.
#
# 🧪 Purpose (Technical Summary):
# Concrete UserRepository over the read-through cache base, with a placeholder
# profile as degraded default and merge-only updates after creation.
#
# 🔗 Dependencies:
# - toollender.shared.infrastructure.cache.read_through (cache policy)
# - toollender.modules.tool_lending.domain (UserProfile model, repository interface)
#
# 🔄 Connected Modules / Calls From:
# - toollender.container
# - application services (account)

from typing import Any, Dict, Optional

from toollender.shared.core.exceptions import RemoteStoreError, ValidationError
from toollender.shared.infrastructure.cache.local_store import LocalStore
from toollender.shared.infrastructure.cache.read_through import ReadThroughRepository
from toollender.shared.infrastructure.cache.synchronizer import CacheSynchronizer
from toollender.shared.infrastructure.remote_store.base import (
    Document,
    ReadMode,
    RemoteStoreClient,
    WriteMode,
)
from toollender.shared.utils.logging import get_logger
from toollender.modules.tool_lending.domain.models.association import ALL_ASSOCIATIONS
from toollender.modules.tool_lending.domain.models.user_profile import UserProfile
from toollender.modules.tool_lending.domain.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class UserRepositoryImpl(UserRepository, ReadThroughRepository[UserProfile]):
    """
    Remote store implementation of the UserRepository interface.
    """

    entity_name = "user"

    def __init__(
        self,
        remote: RemoteStoreClient,
        local_store: LocalStore,
        synchronizer: CacheSynchronizer,
        collection: str = "users",
    ):
        super().__init__(remote, local_store, synchronizer, collection)

    def _decode(self, document: Document) -> UserProfile:
        return UserProfile.from_document(document.id, document.data)

    def _to_record(self, entity: UserProfile) -> Dict[str, Any]:
        return entity.to_record()

    def _degraded_default(self, entity_id: str, error: RemoteStoreError) -> UserProfile:
        logger.info(f"Using placeholder profile for {entity_id}", user_id=entity_id)
        return UserProfile.placeholder(entity_id)

    async def fetch_one(self, user_id: str, read_mode: ReadMode = ReadMode.CACHE) -> UserProfile:
        return await self._read_document(user_id, read_mode)

    async def create(
        self,
        user_id: str,
        name: str,
        email: str,
        association_id: str,
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> UserProfile:
        """
        Write a new profile document at the auth subject id.

        Returns:
            The profile as re-read from the server
        """
        blank = [
            field for field, value in (("user_id", user_id), ("name", name), ("email", email))
            if not (value or "").strip()
        ]
        if blank:
            raise ValidationError(
                f"Required fields are blank: {', '.join(blank)}",
                field=blank[0],
                constraint="not_blank",
            )

        profile = UserProfile(
            id=user_id.strip(),
            name=name.strip(),
            email=email.strip(),
            association_id=(association_id or "").strip() or ALL_ASSOCIATIONS,
            phone_number=phone_number,
            address=address,
        )
        await self.remote.set(self.collection, profile.id, profile.to_document_fields(), WriteMode.OVERWRITE)
        created = await self._refresh_document(profile.id)

        logger.log_business_event(
            "user_created",
            f"Profile created for {created.id}",
            entity_id=created.id,
            entity_type="user",
            extra={"association_id": created.association_id},
        )
        return created

    async def update(self, user_id: str, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        await self.remote.set(self.collection, user_id, fields, WriteMode.MERGE)
        self._remember_fields(user_id, fields)
        logger.debug(f"Profile {user_id} updated: {sorted(fields)}")

    async def update_association(self, user_id: str, association: str) -> None:
        await self.update(user_id, {"associationId": association})

    async def delete(self, user_id: str) -> None:
        await self.remote.delete(self.collection, user_id)
        self._forget(user_id)
        logger.log_business_event("user_deleted", f"Profile {user_id} deleted", entity_id=user_id, entity_type="user")
