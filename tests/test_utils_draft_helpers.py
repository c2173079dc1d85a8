"""
Unit tests for draft helper functions in utils/draft_helpers.py.

These tests verify:
1. current_turn() derives the participant on the clock from join order and picks
2. attempt_pick() checks its preconditions in order and never mutates its inputs
3. build_draft_state() / format_turn_display() summarise a draft correctly

Why these tests matter:
- The turn is never stored, so these functions ARE the draft order
- Every rejected pick must carry a distinguishable reason
"""
from datetime import datetime, timedelta

import pytest

from exceptions import (
    AlreadyPickedError,
    NotYourTurnError,
    PlayerAlreadyTakenError,
    UnknownPlayerError,
)
from tests.factories import BASE_TIME, ParticipantFactory, PickFactory, PlayerFactory
from utils.draft_helpers import (
    attempt_pick,
    available_players,
    build_draft_state,
    current_turn,
    find_player,
    format_turn_display,
    is_complete,
    order_participants,
    picks_for_game,
)


@pytest.fixture
def participants():
    """A joined first, then B, then C."""
    return ParticipantFactory.in_join_order("A", "B", "C")


@pytest.fixture
def roster():
    """Three-player roster P1, P2, P3."""
    return [
        PlayerFactory.create(name="P1", number=1, position="C"),
        PlayerFactory.create(name="P2", number=2, position="D"),
        PlayerFactory.create(name="P3", number=3, position="G"),
    ]


class TestDraftScenario:
    """Walk a full three-participant draft for one game."""

    def test_full_draft(self, participants, roster):
        """
        A, B, C draft in join order; rejections leave the pick log untouched.

        Why: This is the end-to-end contract of the tracker.
        """
        picks = []
        assert current_turn(participants, picks, "G1") == "A"

        with pytest.raises(NotYourTurnError) as exc_info:
            attempt_pick("B", "P1", "G1", participants, picks, roster)
        assert exc_info.value.current_turn == "A"
        assert picks == []

        pick = attempt_pick("A", "P1", "G1", participants, picks, roster)
        picks.append(pick)
        assert current_turn(participants, picks, "G1") == "B"

        with pytest.raises(PlayerAlreadyTakenError):
            attempt_pick("B", "P1", "G1", participants, picks, roster)
        assert len(picks) == 1

        picks.append(attempt_pick("B", "P2", "G1", participants, picks, roster))
        picks.append(attempt_pick("C", "P3", "G1", participants, picks, roster))

        assert current_turn(participants, picks, "G1") is None
        assert is_complete(participants, picks, "G1") is True

    def test_pick_after_complete_is_not_your_turn(self, participants, roster):
        """Once everyone has picked, any further attempt is rejected as out of turn."""
        picks = [
            PickFactory.create(user_id="A", player_name="P1"),
            PickFactory.create(user_id="B", player_name="P2"),
            PickFactory.create(user_id="C", player_name="P3"),
        ]

        with pytest.raises(NotYourTurnError, match="complete") as exc_info:
            attempt_pick("A", "P2", "G1", participants, picks, roster)
        assert exc_info.value.current_turn is None


class TestCurrentTurn:
    """Tests for current_turn()."""

    def test_first_by_join_time_regardless_of_input_order(self):
        """
        With no picks, the earliest joiner is on the clock.

        Why: Membership sources are not required to return rows sorted.
        """
        a, b, c = ParticipantFactory.in_join_order("A", "B", "C")
        for ordering in ([a, b, c], [c, b, a], [b, c, a]):
            assert current_turn(ordering, [], "G1") == "A"

    def test_no_participants_is_complete(self):
        """An empty league has no one on the clock."""
        assert current_turn([], [], "G1") is None
        assert is_complete([], [], "G1") is True

    def test_picks_in_other_games_are_ignored(self, participants):
        """A new game starts back at the first participant."""
        picks = [
            PickFactory.create(user_id="A", player_name="P1", game_id="G1"),
            PickFactory.create(user_id="B", player_name="P2", game_id="G1"),
        ]
        assert current_turn(participants, picks, "G1") == "C"
        assert current_turn(participants, picks, "G2") == "A"

    def test_picks_by_non_members_do_not_complete_draft(self, participants):
        """Picks by someone who is no longer a member do not count for anyone else."""
        picks = [PickFactory.create(user_id="departed", player_name="P1")]
        assert current_turn(participants, picks, "G1") == "A"

    def test_departed_participant_is_skipped(self, participants):
        """
        Removing the on-the-clock participant hands the turn to the next one.

        Why: Leaving while on the clock forfeits the turn.
        """
        picks = [PickFactory.create(user_id="A", player_name="P1")]
        assert current_turn(participants, picks, "G1") == "B"

        without_b = [p for p in participants if p.user_id != "B"]
        assert current_turn(without_b, picks, "G1") == "C"

    def test_none_iff_everyone_picked(self, participants):
        """current_turn is None exactly when every participant holds a pick."""
        picks = []
        for user_id, player in (("A", "P1"), ("B", "P2"), ("C", "P3")):
            assert current_turn(participants, picks, "G1") is not None
            picks.append(PickFactory.create(user_id=user_id, player_name=player))
        assert current_turn(participants, picks, "G1") is None


class TestOrderParticipants:
    """Tests for order_participants()."""

    def test_ties_keep_source_order(self):
        """Participants who joined at the same instant keep their given order."""
        same_time = [
            ParticipantFactory.create(user_id="X", joined_at=BASE_TIME),
            ParticipantFactory.create(user_id="Y", joined_at=BASE_TIME),
        ]
        assert [p.user_id for p in order_participants(same_time)] == ["X", "Y"]

    def test_duplicate_user_counts_once(self):
        """A duplicated membership row does not give a participant two turns."""
        rows = [
            ParticipantFactory.create(user_id="A", joined_at=BASE_TIME),
            ParticipantFactory.create(user_id="B", joined_at=BASE_TIME + timedelta(minutes=1)),
            ParticipantFactory.create(user_id="A", joined_at=BASE_TIME + timedelta(minutes=2)),
        ]
        assert [p.user_id for p in order_participants(rows)] == ["A", "B"]

    def test_join_times_with_and_without_offset(self):
        """A membership row stored without an offset is read as UTC and still sorts."""
        rows = [
            ParticipantFactory.create(user_id="A", joined_at=BASE_TIME),
            ParticipantFactory.create(user_id="B", joined_at=datetime(2025, 10, 1, 11, 0)),
        ]

        assert [p.user_id for p in order_participants(rows)] == ["B", "A"]
        assert current_turn(rows, [], "G1") == "B"


class TestAttemptPick:
    """Tests for attempt_pick() precondition ordering and results."""

    def test_unknown_player(self, participants, roster):
        """A player not on the roster is rejected."""
        with pytest.raises(UnknownPlayerError) as exc_info:
            attempt_pick("A", "Wayne Gretzky", "G1", participants, [], roster)
        assert exc_info.value.reason == "unknown_player"
        assert exc_info.value.participant_id == "A"
        assert exc_info.value.player_id == "Wayne Gretzky"

    def test_turn_checked_before_roster(self, participants, roster):
        """
        Out-of-turn attempts report NotYourTurn even for unknown players.

        Why: The first failing precondition wins.
        """
        with pytest.raises(NotYourTurnError):
            attempt_pick("B", "Wayne Gretzky", "G1", participants, [], roster)

    def test_second_pick_rejected_as_out_of_turn(self, roster):
        """
        A participant who already picked is never on the clock again for that game.

        Why: The turn check runs first, so a repeat picker sees NotYourTurn;
        AlreadyPicked only surfaces from store conflicts.
        """
        a, b = ParticipantFactory.in_join_order("A", "B")
        # Legacy row without a league still counts for the league's game
        picks = [PickFactory.create(user_id="A", player_name="P1", league_id=None)]

        with pytest.raises(NotYourTurnError) as exc_info:
            attempt_pick("A", "P2", "G1", [a, b], picks, roster, league_id="league-1")
        assert exc_info.value.current_turn == "B"

    def test_already_picked_error_shape(self):
        """AlreadyPickedError carries its reason code and is not retryable."""
        error = AlreadyPickedError("You have already made a pick for this game", participant_id="A")
        assert error.reason == "already_picked"
        assert error.retryable is False
        assert error.participant_id == "A"

    def test_case_insensitive_lookup_uses_roster_name(self, participants, roster):
        """Player lookup ignores case and whitespace and records the canonical roster entry."""
        pick = attempt_pick("A", "  p2 ", "G1", participants, [], roster, league_id="league-1")

        assert pick.player_name == "P2"
        assert pick.player_number == 2
        assert pick.player_position == "D"
        assert pick.league_id == "league-1"
        assert pick.game_id == "G1"
        assert pick.created_at is not None

    def test_taken_check_is_case_insensitive(self, participants, roster):
        """A player stored with different casing is still taken."""
        picks = [PickFactory.create(user_id="A", player_name="p1")]
        with pytest.raises(PlayerAlreadyTakenError):
            attempt_pick("B", "P1", "G1", participants, picks, roster)

    def test_taken_check_ignores_stored_whitespace(self, participants, roster):
        """A stored name with stray spaces still claims the roster player."""
        picks = [PickFactory.create(user_id="A", player_name="P1 ")]
        with pytest.raises(PlayerAlreadyTakenError):
            attempt_pick("B", "P1", "G1", participants, picks, roster)

    def test_non_member_told_they_are_not_in_league(self, participants, roster):
        """Someone outside the league is rejected as out of turn with a clear message."""
        with pytest.raises(NotYourTurnError) as exc_info:
            attempt_pick("Z", "P1", "G1", participants, [], roster)
        assert str(exc_info.value) == "You are not a member of this league"
        assert exc_info.value.current_turn == "A"

    def test_inputs_are_not_modified(self, participants, roster):
        """
        attempt_pick returns a new Pick and leaves its inputs untouched.

        Why: Appending is the store's job; the helper must stay pure.
        """
        picks = [PickFactory.create(user_id="A", player_name="P1")]
        picks_before = list(picks)
        roster_before = list(roster)
        participants_before = list(participants)

        pick = attempt_pick("B", "P2", "G1", participants, picks, roster, now=BASE_TIME)

        assert picks == picks_before
        assert roster == roster_before
        assert participants == participants_before
        assert pick.created_at == BASE_TIME

    def test_picks_from_other_leagues_ignored(self, participants, roster):
        """Another league drafting the same game does not claim players here."""
        other_league = [PickFactory.create(user_id="Z", player_name="P1", league_id="league-2")]
        pick = attempt_pick("A", "P1", "G1", participants, other_league, roster, league_id="league-1")
        assert pick.player_name == "P1"


class TestRosterHelpers:
    """Tests for find_player(), available_players() and picks_for_game()."""

    def test_find_player(self, roster):
        assert find_player(roster, "P3").number == 3
        assert find_player(roster, "p3").number == 3
        assert find_player(roster, "nobody") is None
        assert find_player(roster, "") is None

    def test_available_players_excludes_taken_in_game(self, roster):
        picks = [
            PickFactory.create(user_id="A", player_name="P1", game_id="G1"),
            PickFactory.create(user_id="A", player_name="P2", game_id="G2"),
        ]
        names = [p.name for p in available_players(roster, picks, "G1")]
        assert names == ["P2", "P3"]

    def test_picks_for_game_league_filter(self):
        picks = [
            PickFactory.create(user_id="A", league_id="league-1"),
            PickFactory.create(user_id="B", league_id="league-2"),
            PickFactory.create(user_id="C", league_id=None),
            PickFactory.create(user_id="D", game_id="G2"),
        ]
        assert [p.user_id for p in picks_for_game(picks, "G1")] == ["A", "B", "C"]
        assert [p.user_id for p in picks_for_game(picks, "G1", "league-1")] == ["A", "C"]


class TestDraftState:
    """Tests for build_draft_state() and format_turn_display()."""

    def test_state_in_progress(self, participants, roster):
        picks = [PickFactory.create(user_id="A", player_name="P1")]
        state = build_draft_state(participants, picks, roster, "G1", "league-1")

        assert state.participant_ids == ["A", "B", "C"]
        assert state.current_turn == "B"
        assert state.on_deck == "C"
        assert state.picks_made == 1
        assert [p.name for p in state.available_players] == ["P2", "P3"]
        assert state.is_complete is False
        assert format_turn_display(state) == "Pick 2 of 3"

    def test_state_complete(self, participants, roster):
        picks = [
            PickFactory.create(user_id="A", player_name="P1"),
            PickFactory.create(user_id="B", player_name="P2"),
            PickFactory.create(user_id="C", player_name="P3"),
        ]
        state = build_draft_state(participants, picks, roster, "G1", "league-1")

        assert state.is_complete is True
        assert state.current_turn is None
        assert state.on_deck is None
        assert state.available_players == []
        assert format_turn_display(state) == "Complete (3 of 3)"

    def test_departed_picker_not_counted_in_progress(self, participants, roster):
        """Picks by people who left stay in the log but don't inflate progress."""
        picks = [PickFactory.create(user_id="gone", player_name="P1")]
        state = build_draft_state(participants, picks, roster, "G1", "league-1")

        assert state.picks_made == 1
        assert format_turn_display(state) == "Pick 1 of 3"
        assert [p.name for p in state.available_players] == ["P2", "P3"]
