"""
Draft Views for the Light The Lamp draft bot

Provides embeds for the draft system.
"""
from typing import Optional

import discord

from config import get_config
from exceptions import PickError
from models.draft_state import DraftState
from models.game import Game
from models.pick import Pick
from utils.draft_helpers import format_turn_display
from views.embeds import EmbedTemplate

# Titles shown for each rejection reason
PICK_ERROR_TITLES = {
    "not_your_turn": "Not Your Turn",
    "unknown_player": "Unknown Player",
    "player_already_taken": "Player Already Taken",
    "already_picked": "Already Picked",
    "store_unavailable": "Draft Unavailable",
}


def _mention(user_id: Optional[str]) -> str:
    """Mention Discord users; show other participant ids verbatim."""
    if user_id and user_id.isdigit():
        return f"<@{user_id}>"
    return user_id or "Nobody"


def _truncate_field(value: str) -> str:
    limit = get_config().discord_field_value_limit
    if len(value) <= limit:
        return value
    return value[:limit - 3] + "..."


async def create_draft_status_embed(
    state: DraftState,
    game: Optional[Game] = None,
    pick_in_progress: bool = False
) -> discord.Embed:
    """
    Create the draft status embed.

    Args:
        state: Derived draft state
        game: Game descriptor (optional, for the matchup line)
        pick_in_progress: Whether a pick is being processed right now

    Returns:
        Discord embed with draft progress
    """
    description = game.matchup if game else f"Game {state.game_id}"

    if state.is_complete:
        embed = EmbedTemplate.success(title="Draft Complete", description=description)
    else:
        embed = EmbedTemplate.create_base_embed(
            title="🏒 Draft In Progress",
            description=description
        )
        embed.add_field(name="On The Clock", value=_mention(state.current_turn), inline=True)
        if state.on_deck:
            embed.add_field(name="On Deck", value=_mention(state.on_deck), inline=True)

    embed.add_field(name="Progress", value=format_turn_display(state), inline=True)

    if state.picks:
        picks_str = "\n".join(
            f"**{i}.** {_mention(pick.user_id)} - {pick.player_name}"
            + (f" (#{pick.player_number})" if pick.player_number is not None else "")
            for i, pick in enumerate(state.picks, start=1)
        )
        embed.add_field(name="Picks", value=_truncate_field(picks_str), inline=False)

    if not state.is_complete and state.available_players:
        available_str = ", ".join(p.name for p in state.available_players)
        embed.add_field(
            name=f"Available ({len(state.available_players)})",
            value=_truncate_field(available_str),
            inline=False
        )

    if pick_in_progress:
        embed.set_footer(text="🔒 A pick is being processed")
    else:
        embed.set_footer(text="Use /draft-pick to make your selection")

    return embed


async def create_pick_success_embed(
    pick: Pick,
    next_up: Optional[str] = None,
    draft_complete: bool = False
) -> discord.Embed:
    """
    Create embed for a recorded pick.

    Args:
        pick: The stored pick
        next_up: Participant now on the clock, if known
        draft_complete: Whether the pick finished the draft
    """
    number = f"#{pick.player_number} " if pick.player_number is not None else ""
    embed = EmbedTemplate.success(
        title="Pick Confirmed",
        description=f"{_mention(pick.user_id)} selects **{number}{pick.player_name}**"
    )

    if pick.player_position:
        embed.add_field(name="Position", value=pick.player_position, inline=True)

    if draft_complete:
        up_next = "Draft complete"
    elif next_up:
        up_next = _mention(next_up)
    else:
        up_next = "See `/draft-status`"
    embed.add_field(name="Up Next", value=up_next, inline=True)

    return embed


async def create_pick_illegal_embed(error: PickError) -> discord.Embed:
    """
    Create embed for a rejected pick.

    Stale-view rejections tell the user to check /draft-status; store
    failures tell them to try again shortly.
    """
    embed = EmbedTemplate.error(
        title=PICK_ERROR_TITLES.get(error.reason, "Invalid Pick"),
        description=str(error)
    )

    if error.retryable:
        embed.add_field(name="What now?", value="Please try again in a moment.", inline=False)
    else:
        embed.add_field(name="What now?", value="Check `/draft-status` and pick again.", inline=False)

    return embed


async def create_no_game_embed() -> discord.Embed:
    """Create embed shown when no game is open for picks."""
    return EmbedTemplate.warning(
        title="No Game Scheduled",
        description="There is no game open for picks right now."
    )
