"""
Decorators for the Light The Lamp draft bot

Reduces logging boilerplate in Discord commands.
"""

import inspect
from functools import wraps
from typing import List, Optional

from utils.logging import set_draft_context, get_contextual_logger


def logged_command(
    command_name: Optional[str] = None,
    log_params: bool = True,
    exclude_params: Optional[List[str]] = None
):
    """
    Decorator for Discord commands that adds operation logging.

    Handles:
    - Setting draft context (user, guild, league, game) for all log entries
    - Starting/ending operation timing with a trace_id
    - Logging command start/completion/failure

    Args:
        command_name: Override command name (defaults to function name with dashes)
        log_params: Whether to log command parameters (default: True)
        exclude_params: List of parameter names to exclude from logging

    Example:
        @logged_command("/draft-status")
        async def draft_status(self, interaction, league: str):
            state = await tracker.get_draft_state(league, game_id)
            await interaction.followup.send(embed=create_draft_status_embed(state))

    Exceptions are logged and re-raised so the global error handler still sees them.
    The decorated class should have a 'logger' attribute; one is created otherwise.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(self, interaction, *args, **kwargs):
            cmd_name = command_name or f"/{func.__name__.replace('_', '-')}"

            context = {"command": cmd_name}
            bound = {}
            if log_params:
                param_names = list(inspect.signature(func).parameters.keys())[2:]  # Skip self, interaction
                bound = dict(zip(param_names, args))
                bound.update(kwargs)
                exclude_set = set(exclude_params or [])
                for name, value in bound.items():
                    if name not in exclude_set and name not in ('league', 'game'):
                        context[f"param_{name}"] = value

            set_draft_context(
                interaction=interaction,
                league_id=bound.get('league'),
                game_id=bound.get('game'),
                **context
            )

            logger = getattr(self, 'logger', None) or get_contextual_logger(
                f'{self.__class__.__module__}.{self.__class__.__name__}'
            )
            trace_id = logger.start_operation(f"{func.__name__}_command")

            try:
                logger.info(f"{cmd_name} command started")
                result = await func(self, interaction, *args, **kwargs)
                logger.info(f"{cmd_name} command completed successfully")
                logger.end_operation(trace_id, "completed")
                return result

            except Exception as e:
                logger.error(f"{cmd_name} command failed", error=e)
                logger.end_operation(trace_id, "failed")
                raise

        # Preserve signature for Discord.py command registration
        wrapper.__signature__ = inspect.signature(func)  # type: ignore
        return wrapper
    return decorator
