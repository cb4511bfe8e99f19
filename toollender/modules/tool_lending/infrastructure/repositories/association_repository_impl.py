# 📄 File: toollender/modules/tool_lending/infrastructure/repositories/association_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Loads the list of associations in name order (with "All" on top for the filter
# menu) and adds new associations, refusing names that already exist.
#
# 🧪 Purpose (Technical Summary):
# Concrete AssociationRepository over the read-through cache base. Name uniqueness
# is checked before the insert and enforced again through the remote store's
# unique constraint, whose conflict is reported as AlreadyExistsError.
#
# 🔗 Dependencies:
# - toollender.shared.infrastructure.cache.read_through (cache policy)
# - toollender.modules.tool_lending.domain (Association model, repository interface)
#
# 🔄 Connected Modules / Calls From:
# - toollender.container

from typing import Any, Dict, List

from toollender.shared.core.exceptions import (
    AlreadyExistsError,
    RemoteConflictError,
    ValidationError,
)
from toollender.shared.infrastructure.cache.local_store import LocalStore
from toollender.shared.infrastructure.cache.read_through import ReadThroughRepository
from toollender.shared.infrastructure.cache.synchronizer import CacheSynchronizer
from toollender.shared.infrastructure.remote_store.base import (
    SERVER_TIMESTAMP,
    Document,
    FieldFilter,
    OrderBy,
    ReadMode,
    RemoteStoreClient,
)
from toollender.shared.utils.logging import get_logger
from toollender.modules.tool_lending.domain.models.association import ALL_ASSOCIATIONS, Association
from toollender.modules.tool_lending.domain.repositories.association_repository import (
    AssociationRepository,
)

logger = get_logger(__name__)


class AssociationRepositoryImpl(AssociationRepository, ReadThroughRepository[Association]):
    """
    Remote store implementation of the AssociationRepository interface.
    """

    entity_name = "association"
    default_order = OrderBy("name")

    def __init__(
        self,
        remote: RemoteStoreClient,
        local_store: LocalStore,
        synchronizer: CacheSynchronizer,
        collection: str = "associations",
    ):
        super().__init__(remote, local_store, synchronizer, collection)

    def _decode(self, document: Document) -> Association:
        return Association.from_document(document.id, document.data)

    def _to_record(self, entity: Association) -> Dict[str, Any]:
        return entity.to_record()

    async def fetch_all(
        self,
        insert_all: bool = True,
        read_mode: ReadMode = ReadMode.CACHE,
    ) -> List[Association]:
        associations = await self._read_collection(read_mode)
        if insert_all and not any(a.name == ALL_ASSOCIATIONS for a in associations):
            associations.insert(0, Association.virtual_all())
        return associations

    async def create(self, name: str) -> Association:
        """
        Add an association with a unique, trimmed name.

        Raises:
            ValidationError: If the name is blank or "All"
            AlreadyExistsError: If the name is taken, either found by the
                pre-check or reported by the store's unique constraint
        """
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError("Association name cannot be blank", field="name", constraint="not_blank")
        if trimmed == ALL_ASSOCIATIONS:
            raise ValidationError(
                f'"{ALL_ASSOCIATIONS}" is reserved',
                field="name",
                value=trimmed,
                constraint="reserved",
            )

        existing = await self.remote.query(
            self.collection,
            filters=(FieldFilter("name", trimmed),),
            mode=ReadMode.SERVER,
        )
        if existing:
            raise self._already_exists(trimmed)

        try:
            doc_id = await self.remote.add(self.collection, {"name": trimmed, "createdAt": SERVER_TIMESTAMP})
        except RemoteConflictError as e:
            raise self._already_exists(trimmed) from e

        association = await self._refresh_document(doc_id)
        logger.log_business_event(
            "association_created",
            f"Association {trimmed} created",
            entity_id=doc_id,
            entity_type="association",
        )
        return association

    @staticmethod
    def _already_exists(name: str) -> AlreadyExistsError:
        return AlreadyExistsError(
            f"Association {name} already exists",
            resource_type="association",
            field="name",
            value=name,
        )
