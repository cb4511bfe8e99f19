# 📄 File: toollender/modules/tool_lending/domain/models/user_profile.py
# 🧭 Purpose (Layman Explanation):
# Describes a ToolLender member: their name, email, phone, address and which
# association (building or community) they belong to.
# 🧪 Purpose (Technical Summary):
# UserProfile domain model keyed by the auth subject id. Every field has a default
# on decode, so any stored document (or none at all) yields a usable profile.
# 🔗 Dependencies:
# pydantic, typing
# 🔄 Connected Modules / Calls From:
# user_repository_impl.py, account_service.py

from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from toollender.shared.core.exceptions import DecodeError
from .association import ALL_ASSOCIATIONS

DEFAULT_USER_NAME = "Bruger"


class UserProfile(BaseModel):
    """
    User profile domain model.

    Profiles are created once at registration and afterwards only changed
    through partial (merge) updates.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = DEFAULT_USER_NAME
    email: str = ""
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    address: Optional[str] = None
    association_id: str = Field(ALL_ASSOCIATIONS, alias="associationId")

    # Older documents stored the association name under this key
    LEGACY_ASSOCIATION_FIELD: ClassVar[str] = "association"

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "UserProfile":
        """
        Decode a remote document, applying defaults for absent fields.

        Raises:
            DecodeError: If a present field has an unusable type
        """
        fields = {k: v for k, v in data.items() if v is not None}
        legacy = fields.pop(cls.LEGACY_ASSOCIATION_FIELD, None)
        if "associationId" not in fields and legacy is not None:
            fields["associationId"] = legacy

        try:
            return cls.model_validate({**fields, "id": doc_id})
        except PydanticValidationError as e:
            raise DecodeError(
                f"User {doc_id} has invalid fields: {e.error_count()} errors",
                resource_type="user",
                resource_id=doc_id,
            ) from e

    @classmethod
    def placeholder(cls, user_id: str) -> "UserProfile":
        """Profile shown when the real one cannot be loaded."""
        return cls(id=user_id)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_document_fields(self) -> Dict[str, Any]:
        """Document fields without the id, omitting unset optional values."""
        record = self.to_record()
        record.pop("id")
        return {k: v for k, v in record.items() if v is not None}
