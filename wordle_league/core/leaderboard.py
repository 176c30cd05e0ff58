#!/usr/bin/python

import math
import logging
from typing import Dict, Iterable, List, Optional

from .models import LeaderboardRow, ResultRow

logger = logging.getLogger(__name__)

# A failed game counts as a seventh guess for the average/spread metrics
FAIL_VALUE = 7
MAX_GUESSES = 6


def _mean(values: List[int]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _sample_std_dev(values: List[int]) -> Optional[float]:
    """
    Two-pass sample standard deviation (n - 1 in the denominator).
    None for no values, 0.0 for a single value.
    """
    if not values:
        return None
    if len(values) == 1:
        return 0.0
    mean = sum(values) / len(values)
    squared = sum((v - mean) ** 2 for v in values)
    return math.sqrt(squared / (len(values) - 1))


def _summarize(user_id: str, rows: List[ResultRow]) -> LeaderboardRow:
    summary = LeaderboardRow(user_id=user_id)
    substituted: List[int] = []

    for r in rows:
        summary.games_played += 1
        if r.failed:
            summary.failures += 1
            substituted.append(FAIL_VALUE)
            continue
        summary.wins += 1
        guesses = int(r.guesses)
        if 1 <= guesses <= MAX_GUESSES:
            attr = f"g{guesses}"
            setattr(summary, attr, getattr(summary, attr) + 1)
        summary.total += FAIL_VALUE - guesses
        substituted.append(guesses)

    summary.weighted_avg = summary.total / summary.games_played if summary.games_played else 0.0
    summary.avg_guesses = _mean(substituted)
    summary.std_dev = _sample_std_dev(substituted)
    return summary


def _rank_key(row: LeaderboardRow):
    avg = row.avg_guesses if row.avg_guesses is not None else math.inf
    return (-row.weighted_avg, -row.games_played, avg)


def compute_leaderboard(rows: Iterable[ResultRow]) -> List[LeaderboardRow]:
    """
    Aggregate stored results into ranked per-user rows.

    Ranking: weighted average (desc), then games played (desc), then average
    guesses (asc, users without games last). Every call recomputes from the
    rows it is given.
    """
    grouped: Dict[str, List[ResultRow]] = {}
    for r in rows:
        grouped.setdefault(r.user_id, []).append(r)

    board = [_summarize(user_id, user_rows) for user_id, user_rows in grouped.items()]
    board.sort(key=_rank_key)
    logger.debug("compute_leaderboard: %s users", len(board))
    return board


def summarize_user(rows: Iterable[ResultRow], user_id: str) -> Optional[LeaderboardRow]:
    """Stats for a single user, or None if they have no results."""
    user_rows = [r for r in rows if r.user_id == user_id]
    if not user_rows:
        return None
    return _summarize(user_id, user_rows)
