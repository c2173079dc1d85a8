"""
Data models for the Light The Lamp draft bot

Clean Pydantic models with proper validation and type safety.
"""

from models.base import TrackerBaseModel
from models.participant import Participant
from models.player import Player
from models.game import Game
from models.pick import Pick
from models.draft_state import DraftState

__all__ = [
    'TrackerBaseModel',
    'Participant',
    'Player',
    'Game',
    'Pick',
    'DraftState',
]
