"""
Draft tracker service for the Light The Lamp draft bot

Core draft business logic. Whose turn it is is never stored: every call
re-derives it from a fresh read of participants and picks.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple

from exceptions import (
    AlreadyPickedError,
    ConflictException,
    DataSourceException,
    PickError,
    PlayerAlreadyTakenError,
    StoreUnavailableError,
)
from models.draft_state import DraftState
from models.game import Game
from models.participant import Participant
from models.pick import Pick
from models.player import Player
from services.interfaces import MembershipSource, PickStore, RosterSource
from utils import draft_helpers

logger = logging.getLogger(f'{__name__}.DraftTrackerService')


class _DraftLock:
    """Per-game lock and the number of picks holding or waiting on it."""

    __slots__ = ('lock', 'users')

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class DraftTrackerService:
    """
    Service for turn-based draft picks.

    Features:
    - Derive the participant on the clock (lock-free read)
    - Validate and record picks, serialised per league and game
    - Map collaborator failures to StoreUnavailableError
    - Skip participants who leave while on the clock
    """

    def __init__(self,
                 membership_source: MembershipSource,
                 roster_source: RosterSource,
                 pick_store: PickStore):
        self.membership_source = membership_source
        self.roster_source = roster_source
        self.pick_store = pick_store
        self._locks: Dict[Tuple[str, str], _DraftLock] = {}

        membership_source.on_leave(self._handle_leave)
        logger.debug("DraftTrackerService initialized")

    @asynccontextmanager
    async def _draft_lock(self, league_id: str, game_id: str):
        """
        Hold the single-writer lock for one league's draft of one game.

        The entry is dropped once no pick holds or waits on it, so the table
        only ever contains drafts with a pick in flight.
        """
        key = (str(league_id), str(game_id))
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = _DraftLock()

        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._locks.get(key) is entry:
                del self._locks[key]

    def is_pick_in_progress(self, league_id: str, game_id: str) -> bool:
        """Check if a pick is currently being processed for this draft."""
        entry = self._locks.get((str(league_id), str(game_id)))
        return entry is not None and entry.lock.locked()

    async def _load_participants(self, league_id: str) -> List[Participant]:
        try:
            return await self.membership_source.list_participants(league_id)
        except DataSourceException as e:
            logger.error(f"Membership source failed for league {league_id}: {e}")
            raise StoreUnavailableError(f"Could not load league members: {e}")

    async def _load_picks(self, league_id: str, game_id: str) -> List[Pick]:
        try:
            return await self.pick_store.list_picks(league_id, game_id)
        except DataSourceException as e:
            logger.error(f"Pick store failed for league {league_id} game {game_id}: {e}")
            raise StoreUnavailableError(f"Could not load picks: {e}", game_id=game_id)

    async def _load_roster(self, game_id: str) -> List[Player]:
        try:
            return await self.roster_source.current_roster(game_id)
        except DataSourceException as e:
            logger.error(f"Roster source failed for game {game_id}: {e}")
            raise StoreUnavailableError(f"Could not load roster: {e}", game_id=game_id)

    async def current_game(self) -> Optional[Game]:
        """
        Get the game currently open for picks.

        Raises:
            StoreUnavailableError: If the roster source fails
        """
        try:
            return await self.roster_source.current_game()
        except DataSourceException as e:
            logger.error(f"Roster source failed loading current game: {e}")
            raise StoreUnavailableError(f"Could not load current game: {e}")

    async def current_turn(self, league_id: str, game_id: str) -> Optional[str]:
        """
        Get the participant on the clock.

        Returns:
            Participant user_id, or None when the draft is complete

        Raises:
            StoreUnavailableError: If a collaborator fails
        """
        participants = await self._load_participants(league_id)
        picks = await self._load_picks(league_id, game_id)
        return draft_helpers.current_turn(participants, picks, game_id)

    async def is_complete(self, league_id: str, game_id: str) -> bool:
        """Check if every participant has picked for this game."""
        return await self.current_turn(league_id, game_id) is None

    async def get_draft_state(self, league_id: str, game_id: str) -> DraftState:
        """
        Build a full snapshot of the draft for display.

        Raises:
            StoreUnavailableError: If a collaborator fails
        """
        participants = await self._load_participants(league_id)
        picks = await self._load_picks(league_id, game_id)
        roster = await self._load_roster(game_id)

        state = draft_helpers.build_draft_state(participants, picks, roster, game_id, league_id)
        logger.debug(f"League {league_id}: {state}")
        return state

    async def available_players(self, league_id: str, game_id: str) -> List[Player]:
        """Roster players nobody has picked yet for this game."""
        picks = await self._load_picks(league_id, game_id)
        roster = await self._load_roster(game_id)
        return draft_helpers.available_players(roster, picks, game_id)

    async def attempt_pick(
        self,
        league_id: str,
        game_id: str,
        participant_id: str,
        player_id: str
    ) -> Pick:
        """
        Validate and record a pick.

        Picks for the same league and game are processed one at a time, so the
        player-taken check cannot race another pick in this process. A conflict
        reported by the store (another process won the race) is re-checked
        against fresh picks and reported as the matching rejection.

        Args:
            league_id: League being drafted
            game_id: Game being drafted
            participant_id: Participant making the pick
            player_id: Player name being claimed

        Returns:
            The stored Pick

        Raises:
            NotYourTurnError, UnknownPlayerError, PlayerAlreadyTakenError,
            AlreadyPickedError: Pick rejected, nothing recorded
            StoreUnavailableError: A collaborator failed, nothing recorded
        """
        league_id, game_id, participant_id = str(league_id), str(game_id), str(participant_id)

        async with self._draft_lock(league_id, game_id):
            participants = await self._load_participants(league_id)
            picks = await self._load_picks(league_id, game_id)
            roster = await self._load_roster(game_id)

            try:
                pick = draft_helpers.attempt_pick(
                    participant_id, player_id, game_id,
                    participants, picks, roster,
                    league_id=league_id
                )
            except PickError as e:
                logger.info(f"Pick rejected ({e.reason}) for {participant_id} in league {league_id}: {e}")
                raise

            try:
                stored = await self.pick_store.append_pick(pick)
            except ConflictException as e:
                logger.warning(f"Store rejected pick {pick} as a duplicate: {e}")
                raise await self._conflict_error(league_id, game_id, pick)
            except DataSourceException as e:
                logger.error(f"Pick store failed recording {pick}: {e}")
                raise StoreUnavailableError(
                    f"Could not record pick: {e}",
                    participant_id=participant_id, player_id=player_id, game_id=game_id
                )

        logger.info(f"League {league_id} game {game_id}: {participant_id} picked {stored.player_name}")
        return stored

    async def _conflict_error(self, league_id: str, game_id: str, pick: Pick) -> PickError:
        """Work out which uniqueness rule a store conflict violated."""
        context = {'participant_id': pick.user_id, 'player_id': pick.player_name, 'game_id': game_id}
        picks = await self._load_picks(league_id, game_id)

        if any(existing.player_key == pick.player_key for existing in picks):
            return PlayerAlreadyTakenError(f"{pick.player_name} has already been picked", **context)
        if any(existing.user_id == pick.user_id for existing in picks):
            return AlreadyPickedError("You have already made a pick for this game", **context)

        # The conflicting row is not visible yet; report it as the player being taken
        return PlayerAlreadyTakenError(f"{pick.player_name} was just picked by someone else", **context)

    async def _handle_leave(self, participant: Participant) -> None:
        """Log when a departing participant was on the clock in the current game."""
        game = await self.current_game()
        if game is None:
            return

        remaining = await self._load_participants(participant.league_id)
        picks = await self._load_picks(participant.league_id, game.game_id)
        everyone = remaining + [participant]

        if draft_helpers.current_turn(everyone, picks, game.game_id) == participant.user_id:
            next_up = draft_helpers.current_turn(remaining, picks, game.game_id)
            logger.info(
                f"{participant.user_id} left league {participant.league_id} while on the clock; "
                f"skipping to {next_up or 'draft complete'}"
            )
