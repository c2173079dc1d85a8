"""
Draft Status Commands

Display current draft state and information.
"""
from typing import Optional

import discord
from discord.ext import commands

from exceptions import StoreUnavailableError
from services import DraftTrackerService, get_draft_tracker
from utils.logging import get_contextual_logger
from utils.decorators import logged_command
from views.draft_views import create_draft_status_embed, create_no_game_embed
from views.embeds import EmbedTemplate


class DraftStatusCommands(commands.Cog):
    """Draft status display command handlers."""

    def __init__(self, bot: commands.Bot, tracker: Optional[DraftTrackerService] = None):
        self.bot = bot
        self._tracker = tracker
        self.logger = get_contextual_logger(f'{__name__}.DraftStatusCommands')

    @property
    def tracker(self) -> DraftTrackerService:
        """Draft tracker (global instance unless one was injected)."""
        if self._tracker is None:
            self._tracker = get_draft_tracker()
        return self._tracker

    @discord.app_commands.command(
        name="draft-status",
        description="See who is on the clock and what has been picked"
    )
    @discord.app_commands.describe(
        league="League ID",
        game="Game ID (defaults to the current game)"
    )
    @logged_command("/draft-status")
    async def draft_status(
        self,
        interaction: discord.Interaction,
        league: str,
        game: Optional[str] = None
    ):
        """Display current draft state."""
        await interaction.response.defer()

        try:
            current = await self.tracker.current_game()
            game_id = game or (current.game_id if current else None)
            if game_id is None:
                await interaction.followup.send(embed=await create_no_game_embed())
                return

            state = await self.tracker.get_draft_state(league, game_id)

        except StoreUnavailableError as e:
            embed = EmbedTemplate.error(
                "Draft Unavailable",
                f"Could not load the draft right now. Please try again in a moment.\n\n{e}"
            )
            await interaction.followup.send(embed=embed)
            return

        shown_game = current if current and current.game_id == game_id else None
        embed = await create_draft_status_embed(
            state,
            game=shown_game,
            pick_in_progress=self.tracker.is_pick_in_progress(league, game_id)
        )
        await interaction.followup.send(embed=embed)


async def setup(bot: commands.Bot):
    """Load the draft status commands cog."""
    await bot.add_cog(DraftStatusCommands(bot))
