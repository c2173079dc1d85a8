"""
Draft state model

Derived snapshot of a draft. Never stored: it is rebuilt from the ordered
participants and the pick log every time it is needed.
"""
from typing import List, Optional
from pydantic import Field

from models.base import TrackerBaseModel
from models.pick import Pick
from models.player import Player


class DraftState(TrackerBaseModel):
    """Snapshot of one league's draft for one game."""

    league_id: Optional[str] = Field(None, description="League being drafted")
    game_id: str = Field(..., description="Game being drafted")
    participant_ids: List[str] = Field(default_factory=list, description="Participants in draft order")
    picks: List[Pick] = Field(default_factory=list, description="Picks made for this game, oldest first")
    available_players: List[Player] = Field(default_factory=list, description="Roster players not yet picked")
    current_turn: Optional[str] = Field(None, description="Participant on the clock, None when complete")

    @property
    def is_complete(self) -> bool:
        """Check if every participant has picked."""
        return self.current_turn is None

    @property
    def picks_made(self) -> int:
        """Number of picks recorded for this game."""
        return len(self.picks)

    @property
    def on_deck(self) -> Optional[str]:
        """Participant picking after the current one, if any."""
        picked = {pick.user_id for pick in self.picks}
        waiting = [p for p in self.participant_ids if p not in picked]
        return waiting[1] if len(waiting) > 1 else None

    @property
    def remaining_participants(self) -> List[str]:
        """Participants still waiting to pick, in draft order."""
        picked = {pick.user_id for pick in self.picks}
        return [p for p in self.participant_ids if p not in picked]

    def __str__(self):
        if self.is_complete:
            return f"Draft complete: {self.picks_made} picks (game {self.game_id})"
        return f"Draft active: {self.current_turn} on the clock (game {self.game_id})"
