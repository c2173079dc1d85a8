"""
League participant model

A participant is a league membership row. Join time defines draft order.
"""
from datetime import datetime
from pydantic import Field, field_validator

from models.base import TrackerBaseModel, assume_utc


class Participant(TrackerBaseModel):
    """League membership representing one drafting participant."""

    league_id: str = Field(..., description="League this membership belongs to")
    user_id: str = Field(..., description="Opaque participant identifier")
    joined_at: datetime = Field(..., description="When the participant joined the league")

    @field_validator("league_id", "user_id", mode="before")
    @classmethod
    def cast_ids_to_string(cls, v):
        """Ensure identifiers are strings (Discord IDs arrive as ints)."""
        if v is None:
            return v
        return str(v)

    @field_validator("joined_at")
    @classmethod
    def joined_at_as_utc(cls, v: datetime) -> datetime:
        return assume_utc(v)

    def __str__(self):
        return f"{self.user_id} (joined {self.joined_at.isoformat()})"
