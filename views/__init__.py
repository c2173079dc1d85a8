"""
Discord UI components for the Light The Lamp draft bot

### Embed Templates (views.embeds)
- EmbedTemplate: Standard embed creation with consistent styling
- EmbedColors: Standard color palette

### Draft Views (views.draft_views)
- create_draft_status_embed: Who is on the clock, picks made, players left
- create_pick_success_embed / create_pick_illegal_embed: Pick outcomes
"""
from .embeds import EmbedTemplate, EmbedColors
from .draft_views import (
    create_draft_status_embed,
    create_pick_success_embed,
    create_pick_illegal_embed,
    create_no_game_embed,
)

__all__ = [
    'EmbedTemplate',
    'EmbedColors',
    'create_draft_status_embed',
    'create_pick_success_embed',
    'create_pick_illegal_embed',
    'create_no_game_embed',
]
