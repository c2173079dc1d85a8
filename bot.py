"""
Light The Lamp Draft Bot - Main Entry Point

discord.py bot exposing the turn-based player draft as slash commands.
"""
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler

import discord
from discord.ext import commands

from config import get_config
from exceptions import TrackerException
from api.client import cleanup_global_client
from commands.draft import setup_draft
from services import get_draft_tracker
from utils.logging import JSONFormatter
from views.embeds import EmbedTemplate

LOGGER_NAME = 'light_the_lamp'
CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
JSON_LOG_MAX_BYTES = 5 * 1024 * 1024
JSON_LOG_BACKUPS = 5


def _build_handlers(log_dir: str) -> list:
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    os.makedirs(log_dir, exist_ok=True)
    json_file = RotatingFileHandler(
        os.path.join(log_dir, f'{LOGGER_NAME}.json'),
        maxBytes=JSON_LOG_MAX_BYTES,
        backupCount=JSON_LOG_BACKUPS
    )
    json_file.setFormatter(JSONFormatter())

    return [console, json_file]


def setup_logging() -> logging.Logger:
    """
    Console gets readable lines, the rotating file gets one JSON object per entry.

    Module loggers (services.*, commands.*, api.*) reach the same handlers
    through the root logger.
    """
    config = get_config()
    level = getattr(logging, config.log_level.upper())
    handlers = _build_handlers(config.log_dir)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        for handler in handlers:
            root_logger.addHandler(handler)

    bot_logger = logging.getLogger(LOGGER_NAME)
    bot_logger.setLevel(level)
    for handler in handlers:
        bot_logger.addHandler(handler)
    bot_logger.propagate = False

    return bot_logger


class DraftBot(commands.Bot):
    """Slash-command bot that runs the per-game player draft."""

    def __init__(self):
        intents = discord.Intents.default()
        intents.members = True  # participant mentions

        super().__init__(
            command_prefix='!',  # unused, slash commands only
            intents=intents,
            description=get_config().bot_description
        )
        self.logger = logging.getLogger(LOGGER_NAME)

    async def setup_hook(self):
        successful, failed, failed_modules = await setup_draft(self)
        if failed:
            self.logger.warning(f"⚠️  Draft cogs failed to load: {', '.join(failed_modules)}")
        else:
            self.logger.info(f"✅ Draft commands ready ({successful} cogs)")

        if get_config().is_development:
            await self._sync_commands()
        else:
            self.logger.info("Production mode: commands loaded but not auto-synced")

    async def _sync_commands(self):
        guild_id = get_config().guild_id
        if not guild_id:
            synced = await self.tree.sync()
            self.logger.info(f"Synced {len(synced)} commands globally")
            return

        guild = discord.Object(id=guild_id)
        self.tree.copy_global_to(guild=guild)
        synced = await self.tree.sync(guild=guild)
        self.logger.info(f"Synced {len(synced)} commands to guild {guild_id}")

    async def on_ready(self):
        self.logger.info(f"Logged in as {self.user} ({len(self.guilds)} guilds)")
        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.watching, name="the draft board")
        )

    async def on_error(self, event_method: str, /, *args, **kwargs):
        self.logger.error(f"Error in event {event_method}", exc_info=True)

    async def close(self):
        self.logger.info("Bot shutting down...")
        await super().close()


bot = DraftBot()


@bot.tree.command(name="health", description="Check bot and draft store health")
async def health_command(interaction: discord.Interaction):
    """Report connectivity, the configured store backend and the game being drafted."""
    config = get_config()

    try:
        game = await get_draft_tracker().current_game()
        game_status = f"✅ {game.matchup}" if game else "⚠️ No current game"
    except TrackerException as e:
        logging.getLogger(LOGGER_NAME).error(f"Health check could not read the current game: {e}")
        game_status = f"❌ Error: {e}"

    embed = EmbedTemplate.success(title="🏥 Bot Health Check")
    for name, value in (
        ("Bot Status", "✅ Online"),
        ("Store Backend", config.store_backend),
        ("Current Game", game_status),
        ("Latency", f"{bot.latency * 1000:.1f}ms"),
    ):
        embed.add_field(name=name, value=value, inline=True)

    await interaction.response.send_message(embed=embed, ephemeral=True)


def _describe_command_error(error: discord.app_commands.AppCommandError) -> str:
    # Exceptions raised inside a command arrive wrapped in CommandInvokeError
    original = getattr(error, 'original', error)

    if isinstance(error, discord.app_commands.CommandOnCooldown):
        return f"⏰ Command on cooldown. Try again in {error.retry_after:.1f} seconds."
    if isinstance(error, discord.app_commands.MissingPermissions):
        return "❌ You don't have permission to use this command."
    if isinstance(original, TrackerException):
        return f"❌ {original}"

    logging.getLogger(LOGGER_NAME).error(f"Unhandled command error: {error}", exc_info=error)
    message = "❌ An unexpected error occurred. Please try again."
    if get_config().is_development:
        message += f"\n\nDevelopment error: {error}"
    return message


@bot.tree.error
async def on_app_command_error(interaction: discord.Interaction, error: discord.app_commands.AppCommandError):
    message = _describe_command_error(error)
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def main():
    logger = setup_logging()
    config = get_config()
    logger.info(f"Starting Light The Lamp Draft Bot ({config.environment}, "
                f"store backend: {config.store_backend})")

    try:
        await bot.start(config.bot_token)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
    finally:
        await cleanup_global_client()
        await bot.close()


if __name__ == "__main__":
    asyncio.run(main())
