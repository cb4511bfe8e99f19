# 📄 File: toollender/modules/tool_lending/domain/services/identity_provider.py
# 🧭 Purpose (Layman Explanation):
# Describes what ToolLender needs from a sign-in service: who is signed in, signing
# in and out, creating an account and closing it.
# 🧪 Purpose (Technical Summary):
# Identity provider port; the authentication protocol itself is delegated to the
# adapter (Supabase auth).
# 🔗 Dependencies:
# abc, dataclasses, typing
# 🔄 Connected Modules / Calls From:
# account_service.py, infrastructure/external/supabase_identity.py, tests

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthSubject:
    """A signed-in identity; ``id`` doubles as the user profile id."""
    id: str
    email: Optional[str] = None


class IdentityProvider(ABC):
    """Port for the external identity provider."""

    @abstractmethod
    async def current_subject(self) -> Optional[AuthSubject]:
        """Return the signed-in subject, or None."""
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSubject:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthSubject:
        """
        Create an identity and sign it in.

        Raises:
            AuthenticationError: If the provider refuses the registration
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass

    @abstractmethod
    async def delete_current_subject(self) -> None:
        """
        Delete the signed-in identity.

        Raises:
            AuthenticationError: If nobody is signed in or the provider fails
        """
        pass
