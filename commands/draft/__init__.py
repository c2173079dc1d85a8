"""
Draft commands for the Light The Lamp draft bot

- /draft-pick   - Make your pick for the current game
- /draft-status - See who is on the clock and the picks so far
"""
import logging
from typing import Optional

from discord.ext import commands

from services import DraftTrackerService
from .picks import DraftPicksCog
from .status import DraftStatusCommands

logger = logging.getLogger(__name__)

DRAFT_COGS = (DraftPicksCog, DraftStatusCommands)


async def setup_draft(bot: commands.Bot, tracker: Optional[DraftTrackerService] = None):
    """
    Register the draft cogs.

    Both cogs share one tracker (the global one unless given) so that picks
    and status reads see the same per-game locks.

    Returns:
        tuple: (successful_count, failed_count, failed_modules)
    """
    failed_modules = []

    for cog_class in DRAFT_COGS:
        try:
            await bot.add_cog(cog_class(bot, tracker=tracker))
            logger.info(f"✅ Loaded {cog_class.__name__}")
        except Exception as e:
            logger.error(f"❌ Failed to load {cog_class.__name__}: {e}", exc_info=True)
            failed_modules.append(cog_class.__name__)

    successful = len(DRAFT_COGS) - len(failed_modules)
    if failed_modules:
        logger.warning(f"⚠️  Draft commands loaded with issues: {successful} loaded, "
                       f"{len(failed_modules)} failed")

    return successful, len(failed_modules), failed_modules


__all__ = [
    'setup_draft',
    'DraftPicksCog',
    'DraftStatusCommands',
]
