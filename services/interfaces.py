"""
Collaborator contracts for the draft tracker

The tracker only talks to these protocols; each has a REST-backed
implementation and an in-memory one, chosen by configuration.
"""
from typing import Awaitable, Callable, List, Optional, Protocol

from models.game import Game
from models.participant import Participant
from models.pick import Pick
from models.player import Player

MembershipListener = Callable[[Participant], Awaitable[None]]


class MembershipSource(Protocol):
    """Ordered league participants plus join/leave events."""

    async def list_participants(self, league_id: str) -> List[Participant]:
        ...

    async def join(self, league_id: str, user_id: str) -> Participant:
        ...

    async def leave(self, league_id: str, user_id: str) -> bool:
        ...

    def on_join(self, listener: MembershipListener) -> None:
        ...

    def on_leave(self, listener: MembershipListener) -> None:
        ...


class RosterSource(Protocol):
    """Players eligible to be picked for a game."""

    async def current_roster(self, game_id: str) -> List[Player]:
        ...

    async def current_game(self) -> Optional[Game]:
        ...


class PickStore(Protocol):
    """
    Append-only pick log.

    append_pick must be atomic and enforce uniqueness on
    (league, game, player) and (league, game, participant), raising
    ConflictException when either is violated.
    """

    async def list_picks(self, league_id: str, game_id: str) -> List[Pick]:
        ...

    async def append_pick(self, pick: Pick) -> Pick:
        ...
