# wordle_league/core/game_protocol.py
from __future__ import annotations

from typing import Protocol, Dict, List, Optional, runtime_checkable
import discord

from .models import LeaderboardRow, ParsedMessage

@runtime_checkable
class Game(Protocol):
    def parse_summary(self, text: str) -> Optional[ParsedMessage]:
        """
        Parse a summary message into a ParsedMessage:
          puzzle_number: int | None   # from the title, if present
          entries: [ParsedEntry]      # user_id, guesses (None on failure), failed
        Return None if the text doesn't contain any game results.
        """
        ...

    def build_leaderboard_embed(self, rows: List[LeaderboardRow], names: Dict[str, str], limit: int = 10) -> discord.Embed:
        """
        Build and return a Discord embed for ranked leaderboard rows.
        names maps user_id -> display name; missing ids render as mentions.
        """
        ...

    def build_player_embed(self, row: Optional[LeaderboardRow], name: str) -> discord.Embed:
        ...
