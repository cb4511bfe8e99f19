# 📄 File: toollender/modules/tool_lending/domain/models/tool.py
# 🧭 Purpose (Layman Explanation):
# Describes a tool someone offers to lend: its name, description, photo, price per
# day, which association it is listed in and whether it is currently on hold.
# 🧪 Purpose (Technical Summary):
# Tool domain model (pydantic, camelCase aliases matching remote documents) with
# tolerant document decoding, plus the ToolDraft input model for creation.
# 🔗 Dependencies:
# pydantic, datetime, typing, shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# tool_repository_impl.py, tool_catalog.py, tool_upload_service.py, account_service.py

from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from toollender.shared.core.exceptions import DecodeError, ValidationError

# Older documents used these field names
LEGACY_FIELDS = {
    "ownerUID": "ownerId",
    "timestamp": "createdAt",
}


class Tool(BaseModel):
    """
    Tool domain model representing a lendable tool listing.

    Fields:
    - id: Store-assigned identifier, immutable
    - name / description: Listing text
    - image_url: Public URL of the tool photo, if any
    - owner_id: Auth subject id of the owner
    - price_per_day: Optional daily price
    - category: Name of the association the tool is listed under
    - is_on_hold: Whether the tool is temporarily unavailable
    - created_at: Server-assigned creation time
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    image_url: Optional[str] = Field(None, alias="imageURL")
    owner_id: str = Field(alias="ownerId")
    price_per_day: Optional[float] = Field(None, alias="pricePerDay")
    category: str
    is_on_hold: bool = Field(False, alias="isOnHold")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "description", "ownerId", "category")

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Tool":
        """
        Decode a remote document.

        Args:
            doc_id: Document id
            data: Document fields (camelCase)

        Returns:
            Tool instance

        Raises:
            DecodeError: If a required field is missing or a field has the wrong type
        """
        fields = dict(data)
        for legacy, current in LEGACY_FIELDS.items():
            if current not in fields and legacy in fields:
                fields[current] = fields.pop(legacy)

        missing = [f for f in cls.REQUIRED_FIELDS if not isinstance(fields.get(f), str)]
        if missing:
            raise DecodeError(
                f"Tool {doc_id} is missing required fields: {', '.join(missing)}",
                resource_type="tool",
                resource_id=doc_id,
                missing_fields=missing,
            )

        if not fields.get("imageURL"):
            fields["imageURL"] = None
        if fields.get("isOnHold") is None:
            fields["isOnHold"] = False

        try:
            return cls.model_validate({**fields, "id": doc_id})
        except PydanticValidationError as e:
            raise DecodeError(
                f"Tool {doc_id} has invalid fields: {e.error_count()} errors",
                resource_type="tool",
                resource_id=doc_id,
            ) from e

    def to_record(self) -> Dict[str, Any]:
        """JSON-safe mapping with document field names, including the id."""
        return self.model_dump(mode="json", by_alias=True)

    def with_hold(self, is_on_hold: bool) -> "Tool":
        return self.model_copy(update={"is_on_hold": is_on_hold})


class ToolDraft(BaseModel):
    """
    Input for creating a tool listing.

    Text fields default to empty strings; blank values are rejected by
    ``validate_required`` rather than by pydantic.
    """

    name: str = ""
    description: str = ""
    owner_id: str = ""
    category: str = ""
    price_per_day: Optional[float] = None
    image_url: Optional[str] = None

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "description", "owner_id", "category")

    def blank_fields(self) -> List[str]:
        return [f for f in self.REQUIRED_FIELDS if not (getattr(self, f) or "").strip()]

    def validate_required(self) -> "ToolDraft":
        """
        Check required fields and return a trimmed copy.

        Raises:
            ValidationError: If any required field is empty after trimming
        """
        blank = self.blank_fields()
        if blank:
            raise ValidationError(
                f"Required fields are blank: {', '.join(blank)}",
                field=blank[0],
                constraint="not_blank",
                details={"blank_fields": blank},
            )
        return self.model_copy(
            update={f: getattr(self, f).strip() for f in self.REQUIRED_FIELDS}
        )

    def to_document_fields(self) -> Dict[str, Any]:
        """Document fields for a new tool, without server-assigned values."""
        return {
            "name": self.name,
            "description": self.description,
            "ownerId": self.owner_id,
            "category": self.category,
            "pricePerDay": self.price_per_day,
            "imageURL": self.image_url or "",
            "isOnHold": False,
        }
