"""
Base model for all tracker entities

Provides common functionality for data validation, serialization, and API interaction.
"""
from pydantic import BaseModel, field_validator
from typing import Optional, Dict, Any
from datetime import datetime, timezone


def assume_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Read a timestamp without an offset as UTC so timestamps always compare."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TrackerBaseModel(BaseModel):
    """Base model for all tracker entities with common functionality."""

    model_config = {
        "validate_assignment": True,
        "use_enum_values": True,
        "arbitrary_types_allowed": True,
    }

    # Database rows are keyed by UUID strings
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def cast_id_to_string(cls, v):
        """Row IDs are opaque; accept ints from older rows."""
        if v is None:
            return None
        return str(v)

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return assume_utc(v)

    def __repr__(self):
        fields = ', '.join(f'{k}={v}' for k, v in self.model_dump(exclude_none=True).items())
        return f"{self.__class__.__name__}({fields})"

    def to_dict(self, exclude_none: bool = True) -> Dict[str, Any]:
        """Convert model to a JSON-ready dictionary, optionally excluding None values."""
        return self.model_dump(mode="json", exclude_none=exclude_none)

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]):
        """Create model instance from API response data."""
        if not data:
            raise ValueError(f"Cannot create {cls.__name__} from empty data")
        return cls(**data)
