"""
Game descriptor model

Describes the game a draft is being run for.
"""
from typing import Optional
from datetime import datetime
from pydantic import Field, field_validator

from models.base import TrackerBaseModel


class Game(TrackerBaseModel):
    """The current game picks are being made for."""

    game_id: str = Field(..., description="External game identifier")
    opponent: Optional[str] = Field(None, description="Opponent team name")
    game_date: Optional[datetime] = Field(None, description="Scheduled puck drop")
    venue: Optional[str] = Field(None, description="Arena name")
    is_home_game: bool = Field(True, description="Whether the game is at home")
    status: str = Field("scheduled", description="scheduled, inprogress or closed")

    @field_validator("game_id", mode="before")
    @classmethod
    def cast_game_id_to_string(cls, v):
        """Game IDs from the NHL feeds can be numeric."""
        if v is None:
            return v
        return str(v)

    @property
    def is_live(self) -> bool:
        """Check if the game is in progress."""
        return self.status.lower() in ("inprogress", "live")

    @property
    def matchup(self) -> str:
        """Short matchup line, e.g. 'vs Buffalo Sabres'."""
        if not self.opponent:
            return f"Game {self.game_id}"
        return f"{'vs' if self.is_home_game else '@'} {self.opponent}"

    def __str__(self):
        return self.matchup
