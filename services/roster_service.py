"""
Roster service for the Light The Lamp draft bot

Serves the current game and its pickable players from a JSON roster file.
Fetching live NHL data is someone else's job; whatever lands in the file is
treated as the authoritative roster.

File format:
    {
        "current_game": {"game_id": "...", "opponent": "...", "game_date": "...", ...},
        "roster": [{"name": "Dylan Larkin", "number": 71, "position": "C"}, ...],
        "rosters": {"<other game id>": [...]}
    }

"roster" belongs to current_game; "rosters" holds rosters for other games.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from config import get_config
from exceptions import DataSourceException
from models.game import Game
from models.player import Player

logger = logging.getLogger(f'{__name__}.RosterService')


class RosterService:
    """
    File-backed roster source.

    The file is re-read whenever its modification time changes, so a new game
    can be dropped in without restarting the bot.
    """

    def __init__(self, roster_path: Optional[str] = None):
        self.roster_path = Path(roster_path or get_config().roster_path)
        self._loaded_mtime: Optional[float] = None
        self._game: Optional[Game] = None
        self._rosters: Dict[str, List[Player]] = {}
        logger.debug(f"RosterService initialized with {self.roster_path}")

    def _read_if_changed(self) -> Optional[Tuple[float, Dict[str, Any]]]:
        """Blocking file read; None when the file is unchanged since the last load."""
        try:
            mtime = self.roster_path.stat().st_mtime
            if mtime == self._loaded_mtime:
                return None

            with open(self.roster_path, 'r', encoding='utf-8') as f:
                return mtime, json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read roster file {self.roster_path}: {e}")
            raise DataSourceException(f"Roster data unavailable: {e}")

    async def _load(self) -> None:
        """Load (or reload) the roster file if it changed, off the event loop."""
        loop = asyncio.get_running_loop()
        changed = await loop.run_in_executor(None, self._read_if_changed)
        if changed is None:
            return

        mtime, data = changed
        self._game, self._rosters = self._parse(data)
        self._loaded_mtime = mtime
        logger.info(
            f"Loaded roster file {self.roster_path}: "
            f"current game {self._game.game_id if self._game else 'none'}, "
            f"{len(self._rosters)} roster(s)"
        )

    @staticmethod
    def _parse(data: Dict[str, Any]):
        try:
            game_data = data.get('current_game')
            game = Game.from_api_data(game_data) if game_data else None

            rosters: Dict[str, List[Player]] = {}
            for game_id, players in (data.get('rosters') or {}).items():
                rosters[str(game_id)] = [Player.from_api_data(p) for p in players]

            if game and 'roster' in data:
                rosters[game.game_id] = [Player.from_api_data(p) for p in data['roster']]
        except (ValueError, TypeError, AttributeError) as e:
            raise DataSourceException(f"Roster file is malformed: {e}")

        return game, rosters

    async def current_game(self) -> Optional[Game]:
        """Get the game currently open for picks."""
        await self._load()
        return self._game

    async def current_roster(self, game_id: str) -> List[Player]:
        """
        Get the pickable players for a game.

        Returns:
            Players for the game, or an empty list when the game is unknown

        Raises:
            DataSourceException: If the roster file cannot be read
        """
        await self._load()
        roster = self._rosters.get(str(game_id), [])
        if not roster:
            logger.warning(f"No roster found for game {game_id}")
        return list(roster)
