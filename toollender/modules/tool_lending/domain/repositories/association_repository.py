# 📄 File: toollender/modules/tool_lending/domain/repositories/association_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines how the list of associations is read and how a new one is added.
# 🧪 Purpose (Technical Summary):
# Repository interface for Association entities, identified by unique name.
# 🔗 Dependencies:
# abc, typing, domain models, remote_store.base.ReadMode
# 🔄 Connected Modules / Calls From:
# association_repository_impl.py, container

from abc import ABC, abstractmethod
from typing import List

from toollender.shared.infrastructure.remote_store.base import ReadMode
from ..models.association import Association


class AssociationRepository(ABC):
    """Repository interface for Association data access operations."""

    @abstractmethod
    async def fetch_all(
        self,
        insert_all: bool = True,
        read_mode: ReadMode = ReadMode.CACHE,
    ) -> List[Association]:
        """
        Get all associations.

        Args:
            insert_all: Put the virtual "All" association first, unless an
                association named "All" is already present
            read_mode: Cache or server read

        Returns:
            Associations; "All" appears at most once
        """
        pass

    @abstractmethod
    async def create(self, name: str) -> Association:
        """
        Add an association.

        Args:
            name: Association name, trimmed before use

        Returns:
            The stored association

        Raises:
            ValidationError: If the name is blank or reserved
            AlreadyExistsError: If an association with that name exists
        """
        pass
