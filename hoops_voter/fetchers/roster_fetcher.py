"""
Roster fetcher implementation.

Reads players from a JSON roster file, either a bare array of player objects
or an object with a "players" array.
"""

import json
import typing
from pathlib import Path
from typing import Any

from ..exceptions import ValidationError
from ..logging_config import get_logger
from ..models import Player


class RosterFetcher:
    """
    Player fetcher that reads a JSON roster.

    Accepts "player_name" or "name" for the display name. Invalid entries
    are skipped with a warning.
    """

    def __init__(self, roster_path: Path):
        """
        Initialize roster fetcher.

        Args:
            roster_path: JSON file holding the roster
        """
        self.roster_path: Path = Path(roster_path)
        self.logger = get_logger("roster_fetcher")

        if not self.roster_path.exists():
            raise FileNotFoundError(f"Roster file does not exist: {self.roster_path}")
        if not self.roster_path.is_file():
            raise IsADirectoryError(f"Roster path is not a file: {self.roster_path}")

        self._cache = dict[int, Player]()
        self._cache_loaded: bool = False

    def _parse_player(self, entry: dict[str, Any]) -> Player:
        player_id = entry.get("player_id")
        if not isinstance(player_id, int) or isinstance(player_id, bool):
            raise ValidationError(f"player_id must be an integer, got {player_id!r}")
        name = entry.get("player_name", entry.get("name"))
        if not isinstance(name, str):
            raise ValidationError(f"player {player_id} has no name")
        active = entry.get("active", True)
        return Player(
            player_id=player_id,
            name=name,
            team=entry.get("team"),
            headshot_url=entry.get("headshot_url"),
            salary_text=entry.get("salary_text"),
            active=None if active is None else bool(active),
        )

    def _load_players(self) -> None:
        """Load all players from the roster file into cache."""
        if self._cache_loaded:
            return

        with open(self.roster_path, "r", encoding="utf-8") as f:
            data = typing.cast(Any, json.load(f))

        entries = data.get("players", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise ValidationError(f"Roster {self.roster_path} must hold a list of players")

        for position, entry in enumerate(entries):
            try:
                if not isinstance(entry, dict):
                    raise ValidationError("entry must be a JSON object")
                player = self._parse_player(entry)
            except ValidationError as e:
                self.logger.warning(f"Skipping roster entry {position} in {self.roster_path}: {e}")
                continue
            if player.player_id in self._cache:
                self.logger.warning(f"Duplicate player_id {player.player_id} in {self.roster_path}, keeping the last one")
            self._cache[player.player_id] = player

        self._cache_loaded = True
        self.logger.info(f"Loaded {len(self._cache)} players from {self.roster_path}")

    def list_players(self) -> list[Player]:
        """Return all roster players."""
        self._load_players()
        return list(self._cache.values())
