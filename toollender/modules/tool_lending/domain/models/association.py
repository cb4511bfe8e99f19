# 📄 File: toollender/modules/tool_lending/domain/models/association.py
# 🧭 Purpose (Layman Explanation):
# Describes an association: the building or community a tool is listed in.
# "All" is a special pretend association meaning "show everything".
# 🧪 Purpose (Technical Summary):
# Association domain model identified by name, with the virtual "All" entry that
# is synthesized for listings and never stored.
# 🔗 Dependencies:
# pydantic, datetime, typing
# 🔄 Connected Modules / Calls From:
# association_repository_impl.py, tool_catalog.py

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from toollender.shared.core.exceptions import DecodeError

ALL_ASSOCIATIONS = "All"


class Association(BaseModel):
    """Association domain model; ``name`` is the identity."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    id: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @property
    def is_virtual_all(self) -> bool:
        return self.name == ALL_ASSOCIATIONS and self.id is None

    @classmethod
    def virtual_all(cls) -> "Association":
        """The synthesized "All" association."""
        return cls(name=ALL_ASSOCIATIONS)

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Association":
        """
        Decode a remote document.

        Raises:
            DecodeError: If ``name`` is missing or not a string
        """
        if not isinstance(data.get("name"), str):
            raise DecodeError(
                f"Association {doc_id} is missing required fields: name",
                resource_type="association",
                resource_id=doc_id,
                missing_fields=["name"],
            )
        try:
            return cls.model_validate({**data, "id": doc_id})
        except PydanticValidationError as e:
            raise DecodeError(
                f"Association {doc_id} has invalid fields: {e.error_count()} errors",
                resource_type="association",
                resource_id=doc_id,
            ) from e

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
