import logging
from typing import Dict, List, Optional

import discord

from wordle_league.core.models import LeaderboardRow, ParsedMessage
from wordle_league.wordle.parser import parse_summary

logger = logging.getLogger(__name__)


def fmt_num(v):
    return f"{v:.2f}" if isinstance(v, (int, float)) else "—"


def display_for(user_id: str, names: Dict[str, str]) -> str:
    name = names.get(user_id)
    if name:
        return name
    return f"<@{user_id}>" if user_id.isdigit() else user_id


class WordleGame:
    def parse_summary(self, text: str) -> Optional[ParsedMessage]:
        return parse_summary(text)

    def build_leaderboard_embed(self, rows: List[LeaderboardRow], names: Dict[str, str], limit: int = 10) -> discord.Embed:
        """
        Build and return a Discord embed for the current leaderboard.

        rows: output of compute_leaderboard, already ranked
        names: user_id -> display name
        Values are rounded here only; the rows keep full precision.
        """
        embed = discord.Embed(
            title="Wordle Leaderboard",
            description="Ranked by weighted average (points per game played)",
            color=discord.Color.green(),
        )

        if rows:
            lines = []
            for idx, row in enumerate(rows[:limit], start=1):
                lines.append(
                    f"{idx}. {display_for(row.user_id, names)} — Score: {fmt_num(row.weighted_avg)} "
                    f"(pts {row.total}), Games: {row.games_played}, ❌: {row.failures} | "
                    f"Avg: {fmt_num(row.avg_guesses)} ± {fmt_num(row.std_dev)}"
                )
            embed.add_field(name="Leaderboard", value="\n".join(lines), inline=False)
        else:
            embed.add_field(name="Leaderboard", value="No results yet.", inline=False)

        games = sum(r.games_played for r in rows)
        failures = sum(r.failures for r in rows)
        ones = sum(r.g1 for r in rows)
        embed.add_field(
            name="Totals",
            value=f"Players: {len(rows)} • Games: {games} • 1️⃣: {ones} • ❌: {failures}",
            inline=False,
        )
        return embed

    def build_player_embed(self, row: Optional[LeaderboardRow], name: str) -> discord.Embed:
        embed = discord.Embed(title=f"Wordle Stats — {name}", color=discord.Color.blurple())
        if row is None:
            embed.description = "No results yet."
            return embed

        embed.add_field(name="Games", value=str(row.games_played))
        embed.add_field(name="Wins", value=str(row.wins))
        embed.add_field(name="Failures", value=str(row.failures))
        embed.add_field(name="Avg guesses", value=fmt_num(row.avg_guesses))
        embed.add_field(name="Std dev", value=fmt_num(row.std_dev))
        embed.add_field(name="Weighted avg", value=fmt_num(row.weighted_avg))
        distribution = "\n".join(f"{k}/6: {count}" for k, count in enumerate(row.guess_counts(), start=1))
        embed.add_field(name="Guess distribution", value=distribution, inline=False)
        return embed
