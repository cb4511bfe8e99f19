# 📄 File: toollender/modules/tool_lending/domain/repositories/user_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines how member profiles are looked up, created, changed and removed, without
# saying where they are stored.
# 🧪 Purpose (Technical Summary):
# Repository interface for UserProfile entities keyed by the auth subject id.
# 🔗 Dependencies:
# abc, typing, domain models, remote_store.base.ReadMode
# 🔄 Connected Modules / Calls From:
# user_repository_impl.py, account_service.py

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from toollender.shared.infrastructure.remote_store.base import ReadMode
from ..models.user_profile import UserProfile


class UserRepository(ABC):
    """
    Repository interface for UserProfile data access operations.

    Implementation Notes:
    - fetch_one never fails because the server is unreachable; it returns
      a placeholder profile ("Bruger", association "All") instead
    - Profiles are only created once; later changes are merge updates
    """

    @abstractmethod
    async def fetch_one(self, user_id: str, read_mode: ReadMode = ReadMode.CACHE) -> UserProfile:
        """
        Get a user's profile.

        Args:
            user_id: Auth subject ID
            read_mode: Cache or server read

        Returns:
            The profile, or a placeholder when offline with nothing cached

        Raises:
            NotFoundError: If the server has no profile for ``user_id``
        """
        pass

    @abstractmethod
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
        Write a new profile at the auth subject ID.

        Raises:
            ValidationError: If name or email is blank
        """
        pass

    @abstractmethod
    async def update(self, user_id: str, fields: Dict[str, Any]) -> None:
        """
        Merge ``fields`` into the profile.

        Args:
            user_id: Auth subject ID
            fields: Document field names to values; empty is a no-op
        """
        pass

    @abstractmethod
    async def update_association(self, user_id: str, association: str) -> None:
        """Change the association a user belongs to."""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Delete the profile document. The user's tools are left in place."""
        pass
