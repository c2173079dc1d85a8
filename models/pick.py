"""
Pick model

A pick is one participant claiming one player for one game. Picks are
append-only: once recorded they are never edited.

API FIELD MAPPING:
The picks table stores the participant as user_id and the player by
name/number/position (player_name, player_number, player_position).
"""
from typing import Optional
from pydantic import Field, field_validator

from models.base import TrackerBaseModel


class Pick(TrackerBaseModel):
    """Immutable draft pick record."""

    model_config = {"frozen": True}

    league_id: Optional[str] = Field(None, description="League the pick was made in")
    user_id: str = Field(..., description="Participant who made the pick")
    player_name: str = Field(..., description="Player claimed (player identifier)")
    player_number: Optional[int] = Field(None, description="Jersey number of the player")
    player_position: Optional[str] = Field(None, description="Position of the player")
    game_id: str = Field(..., description="Game the pick applies to")

    @field_validator("league_id", "user_id", "game_id", mode="before")
    @classmethod
    def cast_ids_to_string(cls, v):
        """Ensure identifiers are strings."""
        if v is None:
            return v
        return str(v)

    @field_validator("player_name", mode="before")
    @classmethod
    def strip_player_name(cls, v):
        """Names are compared trimmed, matching roster players."""
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def participant_id(self) -> str:
        """Alias for the picking participant."""
        return self.user_id

    @property
    def player_id(self) -> str:
        """Alias for the claimed player."""
        return self.player_name

    @property
    def player_key(self) -> str:
        """Case-insensitive player key used for uniqueness checks."""
        return self.player_name.casefold()

    def to_insert_payload(self) -> dict:
        """Row payload for inserting into the picks table."""
        return self.to_dict(exclude_none=True)

    def __str__(self):
        number = f"#{self.player_number} " if self.player_number is not None else ""
        return f"{self.user_id}: {number}{self.player_name} (game {self.game_id})"
