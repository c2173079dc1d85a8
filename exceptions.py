"""
Custom exceptions for the Light The Lamp draft bot

Pick rejections are typed so callers can tell them apart: the first four mean
the caller's view of the draft is stale and should be refreshed, while
StoreUnavailableError is the only one worth retrying with backoff.
"""


class TrackerException(Exception):
    """Base exception for all tracker-related errors."""
    pass


class DataSourceException(TrackerException):
    """Exception for failures reading or writing an external data source."""
    pass


class APIException(DataSourceException):
    """Exception for API-related errors."""
    pass


class ConflictException(APIException):
    """Raised when the database rejects a write on a uniqueness constraint."""
    pass


class ValidationException(TrackerException):
    """Exception for data validation errors."""
    pass


class ConfigurationException(TrackerException):
    """Exception for configuration-related errors."""
    pass


class DraftException(TrackerException):
    """Exception for draft-related errors."""
    pass


class PickError(DraftException):
    """Base class for a rejected pick attempt."""

    reason = "pick_rejected"
    retryable = False

    def __init__(self, message: str, participant_id: str = None, player_id: str = None,
                 game_id: str = None):
        super().__init__(message)
        self.participant_id = participant_id
        self.player_id = player_id
        self.game_id = game_id


class NotYourTurnError(PickError):
    """Raised when a participant picks out of turn (or after the draft is complete)."""

    reason = "not_your_turn"

    def __init__(self, message: str, current_turn: str = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_turn = current_turn


class UnknownPlayerError(PickError):
    """Raised when the requested player is not on the game roster."""

    reason = "unknown_player"


class PlayerAlreadyTakenError(PickError):
    """Raised when the requested player was already claimed in this game."""

    reason = "player_already_taken"


class AlreadyPickedError(PickError):
    """Raised when the participant already holds a pick for this game."""

    reason = "already_picked"


class StoreUnavailableError(PickError):
    """Raised when a collaborator (membership, roster or pick store) fails."""

    reason = "store_unavailable"
    retryable = True
