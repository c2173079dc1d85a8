"""
Embed Templates for the draft bot

Every embed the bot sends is built here so colours and title icons stay consistent.
"""
from dataclasses import dataclass
from typing import Optional, Union

import discord

from config import get_config


@dataclass(frozen=True)
class EmbedColors:
    """Standard color palette for embeds."""
    PRIMARY: int = 0xce1126      # Red Wings red
    SUCCESS: int = 0x28a745      # Green
    WARNING: int = 0xffc107      # Yellow
    ERROR: int = 0xdc3545        # Red


class EmbedTemplate:
    """Factory methods for the bot's embed styles."""

    @staticmethod
    def create_base_embed(
        title: Optional[str] = None,
        description: Optional[str] = None,
        color: Union[int, discord.Color, None] = None,
        timestamp: bool = True
    ) -> discord.Embed:
        """Plain embed in the configured brand colour, timestamped by default."""
        embed = discord.Embed(
            title=title,
            description=description,
            color=int(get_config().embed_color, 16) if color is None else color
        )
        if timestamp:
            embed.timestamp = discord.utils.utcnow()
        return embed

    @staticmethod
    def _styled(icon: str, color: int, title: str, description: Optional[str], **kwargs) -> discord.Embed:
        return EmbedTemplate.create_base_embed(
            title=f"{icon} {title}",
            description=description,
            color=color,
            **kwargs
        )

    @staticmethod
    def success(title: str = "Success", description: Optional[str] = None, **kwargs) -> discord.Embed:
        return EmbedTemplate._styled("✅", EmbedColors.SUCCESS, title, description, **kwargs)

    @staticmethod
    def error(title: str = "Error", description: Optional[str] = None, **kwargs) -> discord.Embed:
        return EmbedTemplate._styled("❌", EmbedColors.ERROR, title, description, **kwargs)

    @staticmethod
    def warning(title: str = "Warning", description: Optional[str] = None, **kwargs) -> discord.Embed:
        return EmbedTemplate._styled("⚠️", EmbedColors.WARNING, title, description, **kwargs)
