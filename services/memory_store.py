"""
In-memory collaborators for the draft tracker

Used when STORE_BACKEND=memory (local runs, demos) and as test doubles.
They honour the same contracts as the REST-backed services, including the
pick store's uniqueness guarantees.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from exceptions import APIException, ConflictException, ValidationException
from models.game import Game
from models.participant import Participant
from models.pick import Pick
from models.player import Player
from services.membership_service import MembershipEvents

logger = logging.getLogger(f'{__name__}.InMemoryStore')


class _Availability:
    """Lets tests simulate an unreachable store."""

    def __init__(self):
        self.available = True

    def set_available(self, available: bool) -> None:
        self.available = available

    def _check_available(self) -> None:
        if not self.available:
            raise APIException(f"{self.__class__.__name__} is unavailable")


class InMemoryMembershipSource(_Availability, MembershipEvents):
    """Membership source backed by a dict of league -> participants."""

    def __init__(self, participants: Optional[Iterable[Participant]] = None):
        _Availability.__init__(self)
        MembershipEvents.__init__(self)
        self._leagues: Dict[str, List[Participant]] = {}
        for participant in participants or []:
            self._leagues.setdefault(participant.league_id, []).append(participant)

    async def list_participants(self, league_id: str) -> List[Participant]:
        self._check_available()
        members = self._leagues.get(str(league_id), [])
        return sorted(members, key=lambda p: p.joined_at)

    async def join(self, league_id: str, user_id: str,
                   joined_at: Optional[datetime] = None) -> Participant:
        self._check_available()
        league_id, user_id = str(league_id), str(user_id)
        members = self._leagues.setdefault(league_id, [])
        if any(p.user_id == user_id for p in members):
            raise ValidationException("Already a member of this league")

        participant = Participant(
            league_id=league_id,
            user_id=user_id,
            joined_at=joined_at or datetime.now(timezone.utc)
        )
        members.append(participant)
        logger.info(f"User {user_id} joined league {league_id}")
        await self._emit_join(participant)
        return participant

    async def leave(self, league_id: str, user_id: str) -> bool:
        self._check_available()
        league_id, user_id = str(league_id), str(user_id)
        members = self._leagues.get(league_id, [])
        for participant in members:
            if participant.user_id == user_id:
                members.remove(participant)
                logger.info(f"User {user_id} left league {league_id}")
                await self._emit_leave(participant)
                return True
        return False


class InMemoryPickStore(_Availability):
    """
    Append-only pick log.

    append_pick does not await between its uniqueness check and the append,
    so it is atomic with respect to other coroutines on the same loop.
    """

    def __init__(self, picks: Optional[Iterable[Pick]] = None):
        super().__init__()
        self._picks: List[Pick] = []
        self._claimed_players: Dict[Tuple[str, str, str], Pick] = {}
        self._claimed_participants: Dict[Tuple[str, str, str], Pick] = {}
        for pick in picks or []:
            self._insert(pick)

    def _insert(self, pick: Pick) -> Pick:
        league = pick.league_id or ""
        player_key = (league, pick.game_id, pick.player_key)
        participant_key = (league, pick.game_id, pick.user_id)

        if player_key in self._claimed_players:
            raise ConflictException(f"{pick.player_name} already picked in game {pick.game_id}")
        if participant_key in self._claimed_participants:
            raise ConflictException(f"{pick.user_id} already picked in game {pick.game_id}")

        stored = pick
        if pick.created_at is None:
            stored = pick.model_copy(update={'created_at': datetime.now(timezone.utc)})

        self._picks.append(stored)
        self._claimed_players[player_key] = stored
        self._claimed_participants[participant_key] = stored
        return stored

    async def list_picks(self, league_id: str, game_id: str) -> List[Pick]:
        self._check_available()
        league_id, game_id = str(league_id), str(game_id)
        return [
            pick for pick in self._picks
            if (pick.league_id or "") == league_id and pick.game_id == game_id
        ]

    async def append_pick(self, pick: Pick) -> Pick:
        self._check_available()
        stored = self._insert(pick)
        logger.info(f"Recorded pick: {stored}")
        return stored

    @property
    def all_picks(self) -> List[Pick]:
        """Every pick in insertion order (copy)."""
        return list(self._picks)


class InMemoryRosterSource(_Availability):
    """Roster source holding rosters per game."""

    def __init__(self, rosters: Optional[Dict[str, List[Player]]] = None,
                 current_game: Optional[Game] = None):
        super().__init__()
        self._rosters = {str(k): list(v) for k, v in (rosters or {}).items()}
        self._current_game = current_game

    def set_roster(self, game_id: str, players: List[Player]) -> None:
        self._rosters[str(game_id)] = list(players)

    def set_current_game(self, game: Optional[Game]) -> None:
        self._current_game = game

    async def current_game(self) -> Optional[Game]:
        self._check_available()
        return self._current_game

    async def current_roster(self, game_id: str) -> List[Player]:
        self._check_available()
        return list(self._rosters.get(str(game_id), []))
