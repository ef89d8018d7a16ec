from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class BaseSchema(BaseModel):
    """
    Base model shared by all records.
    Documents are stored with camelCase keys; attributes stay snake_case.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra='ignore'
    )

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys; absent values are omitted."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)

class DBModel(BaseSchema):
    """Persisted record with an integer id."""
    id: int = Field(..., description="Unique identifier")
    created_at: Optional[str] = Field(None, description="Creation time (YYYY-MM-DD HH:MM:SS)")
