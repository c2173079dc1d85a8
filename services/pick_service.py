"""
Pick service for the Light The Lamp draft bot

REST-backed pick store. NO CACHING - picks change constantly during a draft.

The picks table must carry unique constraints on (league_id, game_id,
player_name) and (league_id, game_id, user_id); a violated constraint comes
back as HTTP 409, which the client raises as ConflictException.
"""
import logging
from typing import List, Optional

from api.client import APIClient, eq
from config import get_config
from exceptions import APIException
from models.pick import Pick
from services.base_service import BaseService

logger = logging.getLogger(f'{__name__}.PickService')


class PickService(BaseService[Pick]):
    """
    Service for the append-only pick log.

    Features:
    - List picks for a league and game, oldest first
    - Atomic insert relying on database uniqueness
    """

    def __init__(self, client: Optional[APIClient] = None):
        """Initialize pick service."""
        super().__init__(Pick, get_config().picks_table, client=client)
        logger.debug("PickService initialized")

    async def list_picks(self, league_id: str, game_id: str) -> List[Pick]:
        """
        Get all picks for one league and game in the order they were made.

        Raises:
            APIException: For API errors
        """
        params = [
            ('league_id', eq(league_id)),
            ('game_id', eq(game_id)),
            ('order', 'created_at.asc'),
        ]
        picks = await self.get_all_items(params=params)
        logger.debug(f"League {league_id} game {game_id}: {len(picks)} picks")
        return picks

    async def append_pick(self, pick: Pick) -> Pick:
        """
        Insert a pick.

        Returns:
            Stored pick as returned by the database

        Raises:
            ConflictException: If the player or participant already has a pick for the game
            APIException: For other API errors
        """
        stored = await self.create(pick.to_insert_payload())
        if stored is None:
            raise APIException("Pick insert returned no row")

        logger.info(f"Recorded pick: {stored}")
        return stored
