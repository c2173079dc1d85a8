"""
Player model for roster entries

Players are identified by name within a game's roster.
"""
from typing import Optional
from pydantic import Field, field_validator

from models.base import TrackerBaseModel


class Player(TrackerBaseModel):
    """Player model representing one pickable NHL player."""

    name: str = Field(..., description="Player full name (unique within a roster)")
    number: Optional[int] = Field(None, description="Jersey number")
    position: str = Field(..., description="Position (C, LW, RW, D, G)")
    points: Optional[str] = Field(None, description="Display-only stat line, e.g. '1G, 1A'")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        """Trim whitespace around player names."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("position", mode="before")
    @classmethod
    def normalize_position(cls, v):
        """Store positions upper-cased."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def player_id(self) -> str:
        """Identifier used by picks."""
        return self.name

    @property
    def lookup_key(self) -> str:
        """Case-insensitive key used for roster lookups."""
        return self.name.casefold()

    @property
    def is_goalie(self) -> bool:
        """Check if the player is a goaltender."""
        return self.position == "G"

    @property
    def display_name(self) -> str:
        """Name with jersey number and position for menus."""
        if self.number is not None:
            return f"#{self.number} {self.name} ({self.position})"
        return f"{self.name} ({self.position})"

    def __str__(self):
        return self.display_name
