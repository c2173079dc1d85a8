"""
Draft turn helpers

Pure functions that derive whose turn it is and validate picks. The turn is
never stored anywhere: it is always recomputed from the ordered participants
and the pick log, so it cannot drift from the picks actually made.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from exceptions import (
    AlreadyPickedError,
    NotYourTurnError,
    PlayerAlreadyTakenError,
    UnknownPlayerError,
)
from models.draft_state import DraftState
from models.participant import Participant
from models.pick import Pick
from models.player import Player
from utils.logging import get_contextual_logger

logger = get_contextual_logger(__name__)


def order_participants(participants: Iterable[Participant]) -> List[Participant]:
    """
    Put participants in draft order.

    Draft order is join time ascending. Participants who joined at the same
    instant keep the order the membership source returned them in, and a
    repeated user_id only counts once (first occurrence wins).

    Args:
        participants: Participants in any order

    Returns:
        New list in draft order
    """
    seen = set()
    unique = []
    for participant in participants:
        if participant.user_id in seen:
            continue
        seen.add(participant.user_id)
        unique.append(participant)

    return sorted(unique, key=lambda p: p.joined_at)


def picks_for_game(
    picks: Iterable[Pick],
    game_id: str,
    league_id: Optional[str] = None
) -> List[Pick]:
    """Return the picks belonging to one game (and league, when given)."""
    game_id = str(game_id)
    return [
        pick for pick in picks
        if pick.game_id == game_id and (league_id is None or pick.league_id in (None, league_id))
    ]


def current_turn(
    participants: Iterable[Participant],
    picks: Iterable[Pick],
    game_id: str
) -> Optional[str]:
    """
    Determine which participant is on the clock.

    Scans participants in draft order and returns the first whose id has no
    pick for game_id.

    Args:
        participants: League participants
        picks: Pick log (any games)
        game_id: Game being drafted

    Returns:
        Participant user_id, or None when everyone has picked (draft complete)

    Examples:
        >>> current_turn([alice, bob], [], "g1")
        'alice'
        >>> current_turn([alice, bob], [Pick(user_id='alice', ..., game_id='g1')], "g1")
        'bob'
    """
    picked = {pick.user_id for pick in picks_for_game(picks, game_id)}

    for participant in order_participants(participants):
        if participant.user_id not in picked:
            return participant.user_id

    return None


def is_complete(
    participants: Iterable[Participant],
    picks: Iterable[Pick],
    game_id: str
) -> bool:
    """Check if every participant has picked for game_id."""
    return current_turn(participants, picks, game_id) is None


def find_player(roster: Iterable[Player], player_id: str) -> Optional[Player]:
    """
    Look up a roster player by name, ignoring case and surrounding whitespace.

    Returns:
        The roster Player or None if not on the roster
    """
    if not player_id:
        return None

    key = player_id.strip().casefold()
    for player in roster:
        if player.lookup_key == key:
            return player
    return None


def available_players(
    roster: Iterable[Player],
    picks: Iterable[Pick],
    game_id: str
) -> List[Player]:
    """Return roster players nobody has claimed yet for game_id."""
    taken = {pick.player_key for pick in picks_for_game(picks, game_id)}
    return [player for player in roster if player.lookup_key not in taken]


def attempt_pick(
    participant_id: str,
    player_id: str,
    game_id: str,
    participants: Sequence[Participant],
    picks: Sequence[Pick],
    roster: Sequence[Player],
    league_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Pick:
    """
    Validate a pick attempt and build the resulting Pick.

    Preconditions are checked in order and the first failure wins:
    1. participant must be on the clock (NotYourTurnError)
    2. player must be on the roster (UnknownPlayerError)
    3. player must not be claimed in this game (PlayerAlreadyTakenError)
    4. participant must not already hold a pick in this game (AlreadyPickedError)

    Inputs are never modified; the caller appends the returned Pick to its
    store, which implicitly advances the turn.

    Args:
        participant_id: Participant attempting the pick
        player_id: Player name being claimed
        game_id: Game being drafted
        participants: League participants
        picks: Pick log (any games)
        roster: Players eligible for this game
        league_id: League the pick is made in (recorded on the Pick)
        now: Pick timestamp override (defaults to current UTC time)

    Returns:
        New immutable Pick

    Raises:
        NotYourTurnError, UnknownPlayerError, PlayerAlreadyTakenError, AlreadyPickedError
    """
    participant_id = str(participant_id)
    game_id = str(game_id)
    game_picks = picks_for_game(picks, game_id, league_id)
    error_context = {'participant_id': participant_id, 'player_id': player_id, 'game_id': game_id}

    on_the_clock = current_turn(participants, game_picks, game_id)
    if participant_id != on_the_clock:
        if all(p.user_id != participant_id for p in participants):
            message = "You are not a member of this league"
        elif on_the_clock is None:
            message = "The draft for this game is complete"
        else:
            message = f"It is not your turn - {on_the_clock} is on the clock"
        logger.debug(f"Rejected pick by {participant_id}: not their turn", current_turn=on_the_clock)
        raise NotYourTurnError(message, current_turn=on_the_clock, **error_context)

    player = find_player(roster, player_id)
    if player is None:
        logger.debug(f"Rejected pick by {participant_id}: {player_id} not on roster")
        raise UnknownPlayerError(f"{player_id} is not on the roster for this game", **error_context)

    if any(pick.player_key == player.lookup_key for pick in game_picks):
        logger.debug(f"Rejected pick by {participant_id}: {player.name} already taken")
        raise PlayerAlreadyTakenError(f"{player.name} has already been picked", **error_context)

    if any(pick.user_id == participant_id for pick in game_picks):
        logger.debug(f"Rejected pick by {participant_id}: already picked")
        raise AlreadyPickedError("You have already made a pick for this game", **error_context)

    return Pick(
        league_id=league_id,
        user_id=participant_id,
        player_name=player.name,
        player_number=player.number,
        player_position=player.position,
        game_id=game_id,
        created_at=now or datetime.now(timezone.utc)
    )


def build_draft_state(
    participants: Iterable[Participant],
    picks: Iterable[Pick],
    roster: Iterable[Player],
    game_id: str,
    league_id: Optional[str] = None
) -> DraftState:
    """Derive the full DraftState snapshot for one game."""
    game_id = str(game_id)
    ordered = order_participants(participants)
    game_picks = picks_for_game(picks, game_id, league_id)

    return DraftState(
        league_id=league_id,
        game_id=game_id,
        participant_ids=[p.user_id for p in ordered],
        picks=game_picks,
        available_players=available_players(roster, game_picks, game_id),
        current_turn=current_turn(ordered, game_picks, game_id)
    )


def format_turn_display(state: DraftState) -> str:
    """
    Format the draft progress line shown in status embeds.

    Examples:
        >>> format_turn_display(state)
        'Pick 2 of 3'
        >>> format_turn_display(complete_state)
        'Complete (3 of 3)'
    """
    total = len(state.participant_ids)
    made = total - len(state.remaining_participants)
    if state.is_complete:
        return f"Complete ({made} of {total})"
    return f"Pick {made + 1} of {total}"
