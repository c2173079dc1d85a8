"""
Draft Pick Commands

Implements the slash command for making a pick. Turn order, validation and
per-game serialisation all live in the draft tracker service.
"""
import re
from typing import List, Optional

import discord
from discord.ext import commands

from config import get_config
from exceptions import PickError, StoreUnavailableError
from services import DraftTrackerService, get_draft_tracker
from utils.logging import get_contextual_logger
from utils.decorators import logged_command
from views.draft_views import (
    create_no_game_embed,
    create_pick_illegal_embed,
    create_pick_success_embed,
)


def _parse_player_name(raw_input: str) -> str:
    """
    Parse player name from raw input, handling autocomplete display format.

    Discord sometimes sends the autocomplete display text instead of the value
    when users type quickly.

    Examples:
        "Dylan Larkin" -> "Dylan Larkin"
        "#71 Dylan Larkin (C)" -> "Dylan Larkin"
        "Alex Lyon (G)" -> "Alex Lyon"
    """
    match = re.match(r'^(?:#\d+\s+)?(.+?)\s*\([A-Z]{1,2}\)$', raw_input.strip())
    if match:
        return match.group(1).strip()

    return raw_input.strip()


async def available_player_autocomplete(
    interaction: discord.Interaction,
    current: str,
) -> List[discord.app_commands.Choice[str]]:
    """Autocomplete for roster players nobody has picked yet."""
    league = getattr(interaction.namespace, 'league', None)
    if not league:
        return []

    try:
        tracker = get_draft_tracker()
        game = await tracker.current_game()
        if game is None:
            return []

        game_id = getattr(interaction.namespace, 'game', None) or game.game_id
        players = await tracker.available_players(league, game_id)
        needle = current.strip().casefold()

        return [
            discord.app_commands.Choice(name=p.display_name, value=p.name)
            for p in players
            if needle in p.name.casefold()
        ][:get_config().autocomplete_limit]

    except Exception:
        # Autocomplete must answer quickly; an empty list is the failure mode
        return []


class DraftPicksCog(commands.Cog):
    """Draft pick command handlers."""

    def __init__(self, bot: commands.Bot, tracker: Optional[DraftTrackerService] = None):
        self.bot = bot
        self._tracker = tracker
        self.logger = get_contextual_logger(f'{__name__}.DraftPicksCog')

    @property
    def tracker(self) -> DraftTrackerService:
        """Draft tracker (global instance unless one was injected)."""
        if self._tracker is None:
            self._tracker = get_draft_tracker()
        return self._tracker

    @discord.app_commands.command(
        name="draft-pick",
        description="Make your pick for the current game"
    )
    @discord.app_commands.describe(
        league="League ID you are drafting in",
        player="Player to pick (autocomplete shows available players)",
        game="Game ID (defaults to the current game)"
    )
    @discord.app_commands.autocomplete(player=available_player_autocomplete)
    @logged_command("/draft-pick")
    async def draft_pick(
        self,
        interaction: discord.Interaction,
        league: str,
        player: str,
        game: Optional[str] = None
    ):
        """Make a draft pick for the invoking user."""
        await interaction.response.defer()

        try:
            game_id = await self._resolve_game_id(game)
            if game_id is None:
                await interaction.followup.send(embed=await create_no_game_embed())
                return

            participant_id = str(interaction.user.id)
            player_name = _parse_player_name(player)

            pick = await self.tracker.attempt_pick(league, game_id, participant_id, player_name)

        except PickError as e:
            embed = await create_pick_illegal_embed(e)
            await interaction.followup.send(embed=embed)
            return

        next_up = None
        draft_complete = False
        try:
            next_up = await self.tracker.current_turn(league, game_id)
            draft_complete = next_up is None
        except StoreUnavailableError as e:
            # The pick is already recorded; only the follow-up lookup failed
            self.logger.warning(f"Could not load next participant after pick: {e}")

        embed = await create_pick_success_embed(pick, next_up=next_up, draft_complete=draft_complete)
        await interaction.followup.send(embed=embed)

    async def _resolve_game_id(self, game: Optional[str]) -> Optional[str]:
        """Use the given game ID or fall back to the current game."""
        if game:
            return game

        current = await self.tracker.current_game()
        return current.game_id if current else None


async def setup(bot: commands.Bot):
    """Load the draft picks cog."""
    await bot.add_cog(DraftPicksCog(bot))
