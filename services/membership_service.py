"""
Membership service for the Light The Lamp draft bot

Reads and writes league_memberships. Join order defines draft order.
"""
import logging
from typing import List, Optional

from api.client import APIClient, eq
from config import get_config
from exceptions import APIException, ValidationException
from models.participant import Participant
from services.base_service import BaseService
from services.interfaces import MembershipListener

logger = logging.getLogger(f'{__name__}.MembershipService')


class MembershipEvents:
    """Join/leave listener registry shared by membership sources."""

    def __init__(self):
        self._join_listeners: List[MembershipListener] = []
        self._leave_listeners: List[MembershipListener] = []

    def on_join(self, listener: MembershipListener) -> None:
        """Register a coroutine called after a participant joins."""
        self._join_listeners.append(listener)

    def on_leave(self, listener: MembershipListener) -> None:
        """Register a coroutine called after a participant leaves."""
        self._leave_listeners.append(listener)

    async def _emit(self, listeners: List[MembershipListener], participant: Participant) -> None:
        for listener in listeners:
            try:
                await listener(participant)
            except Exception as e:
                # the membership change is already stored
                logger.error(f"Membership listener {getattr(listener, '__name__', listener)} failed: {e}",
                             exc_info=True)

    async def _emit_join(self, participant: Participant) -> None:
        await self._emit(self._join_listeners, participant)

    async def _emit_leave(self, participant: Participant) -> None:
        await self._emit(self._leave_listeners, participant)


class MembershipService(MembershipEvents, BaseService[Participant]):
    """
    REST-backed membership source.

    Features:
    - List participants in join order
    - Join a league (one membership per user per league)
    - Leave a league (emits a leave event so an on-the-clock participant is skipped)
    """

    def __init__(self, client: Optional[APIClient] = None):
        """Initialize membership service."""
        MembershipEvents.__init__(self)
        BaseService.__init__(self, Participant, get_config().memberships_table, client=client)
        logger.debug("MembershipService initialized")

    async def list_participants(self, league_id: str) -> List[Participant]:
        """
        Get league participants ordered by join time.

        NOT cached - membership changes must show up in the next turn scan.

        Raises:
            APIException: For API errors
        """
        params = [
            ('league_id', eq(league_id)),
            ('order', 'joined_at.asc'),
        ]
        participants = await self.get_all_items(params=params)
        logger.debug(f"League {league_id} has {len(participants)} participants")
        return participants

    async def get_participant(self, league_id: str, user_id: str) -> Optional[Participant]:
        """Get a single membership or None."""
        params = [
            ('league_id', eq(league_id)),
            ('user_id', eq(user_id)),
        ]
        rows = await self.get_all_items(params=params)
        return rows[0] if rows else None

    async def join(self, league_id: str, user_id: str) -> Participant:
        """
        Add a participant to a league.

        Raises:
            ValidationException: If the user is already a member
            APIException: For API errors
        """
        user_id = str(user_id)
        if await self.get_participant(league_id, user_id):
            raise ValidationException("Already a member of this league")

        participant = await self.create({'league_id': league_id, 'user_id': user_id})
        if participant is None:
            raise APIException(f"Failed to join league {league_id}")

        logger.info(f"User {user_id} joined league {league_id}")
        await self._emit_join(participant)
        return participant

    async def leave(self, league_id: str, user_id: str) -> bool:
        """
        Remove a participant from a league.

        Returns:
            True if a membership was removed, False if the user was not a member
        """
        user_id = str(user_id)
        participant = await self.get_participant(league_id, user_id)
        if participant is None:
            logger.debug(f"User {user_id} is not a member of league {league_id}")
            return False

        removed = await self.delete_where([
            ('league_id', eq(league_id)),
            ('user_id', eq(user_id)),
        ])
        if removed:
            logger.info(f"User {user_id} left league {league_id}")
            await self._emit_leave(participant)
        return removed
