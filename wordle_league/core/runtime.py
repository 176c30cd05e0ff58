#!/usr/bin/python

from typing import Optional
import logging

# Local imports
from .aliases import AliasResolver
from .config import Settings
from .dates import GameDates
from .game_protocol import Game
from .leaderboard import compute_leaderboard, summarize_user
from .models import ResultRow
from .store import ResultStore

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Message filtering
# -----------------------------------------------------------------------------
def is_summary_source(msg, settings: Settings) -> bool:
    """
    Only messages in the configured channel, written by the Wordle app, are ingested.
    Without WORDLE_BOT_ID any Discord app message counts:
      - bot accounts (author.bot)
      - application/interactions (message.application_id)
      - webhooks (message.webhook_id)
    """
    channel_id = getattr(getattr(msg, "channel", None), "id", None)
    if channel_id != settings.channel_id:
        return False
    author = getattr(msg, "author", None)
    if settings.wordle_bot_id is not None:
        return getattr(author, "id", None) == settings.wordle_bot_id
    return bool(
        getattr(author, "bot", False)
        or getattr(msg, "application_id", None) is not None
        or getattr(msg, "webhook_id", None) is not None
    )

# -----------------------------------------------------------------------------
# Parse a message (delegates to the game plugin) and store results
# -----------------------------------------------------------------------------
async def ingest_message(msg, store: ResultStore, resolver: AliasResolver, game: Game, dates: GameDates) -> int:
    """
    Parse a Discord message via the game plugin and upsert its results.
    Returns the number of results stored from this message.
    """
    content = getattr(msg, "content", "") or ""
    try:
        parsed = game.parse_summary(content)
    except Exception:
        logger.exception("ingest_message: game.parse_summary raised for msg id=%s", getattr(msg, "id", None))
        return 0

    if parsed is None:
        logger.debug("ingest_message: no parsable results in message id=%s", getattr(msg, "id", None))
        return 0

    day = dates.results_date(getattr(msg, "created_at", None))
    date_iso = day.isoformat()
    puzzle_number = parsed.puzzle_number
    if puzzle_number is None:
        puzzle_number = dates.date_to_num(day)
        logger.debug("ingest_message: no title in msg id=%s, puzzle number from date -> %s",
                     getattr(msg, "id", None), puzzle_number)

    stored = 0
    for entry in parsed.entries:
        user_id = entry.user_id
        if entry.is_handle:
            user_id = resolver.resolve(entry.user_id)
            if user_id is None:
                logger.warning("ingest_message: dropping unresolved handle '%s' in msg id=%s",
                               entry.user_id, getattr(msg, "id", None))
                continue
        try:
            store.upsert_result(ResultRow(
                user_id=user_id,
                puzzle_number=puzzle_number,
                date_iso=date_iso,
                guesses=None if entry.failed else entry.guesses,
                failed=entry.failed,
                raw=content,
            ))
        except Exception:
            logger.exception("ingest_message: failed to store result for user_id=%s from msg id=%s",
                             user_id, getattr(msg, "id", None))
            continue
        logger.info(
            "ingest_message: stored result user_id=%s date=%s puzzle=%s guesses=%s failed=%s",
            user_id, date_iso, puzzle_number, entry.guesses, entry.failed
        )
        stored += 1

    return stored

# -----------------------------------------------------------------------------
# Catch up history
# -----------------------------------------------------------------------------
async def catchup(text_channel, settings: Settings, store: ResultStore, resolver: AliasResolver, game: Game, dates: GameDates):
    if not settings.catchup_since:
        logger.info("Catchup disabled (CATCHUP_SINCE not set)")
        return 0
    logger.info("Catching up in channel/thread '%s' since %s",
                getattr(text_channel, "name", str(text_channel)), settings.catchup_since)
    start_date = dates.parse_date(settings.catchup_since)
    total_messages = 0
    total_results = 0

    async for msg in text_channel.history(limit=None, after=start_date, oldest_first=True):
        if not is_summary_source(msg, settings):
            continue
        total_messages += 1
        total_results += await ingest_message(msg, store, resolver, game, dates)

    logger.info("Catchup scanned %s messages, ingested %s results", total_messages, total_results)
    return total_results

# -----------------------------------------------------------------------------
# Leaderboard output
# -----------------------------------------------------------------------------
def _print_embed(embed):
    # Pretty-print the embed to stdout instead of sending to Discord
    print("==== Stats (DEBUG) ====")
    title = getattr(embed, "title", None) or ""
    desc = getattr(embed, "description", None) or ""
    print(f"Title: {title}")
    if desc:
        print(f"Description: {desc}")
    fields = getattr(embed, "fields", []) or []
    for f in fields:
        name = getattr(f, "name", "")
        value = getattr(f, "value", "")
        print(f"\n{name}\n{'-' * len(name)}\n{value}")
    print("==== End Stats (DEBUG) ====")

async def post_leaderboard(text_channel, store: ResultStore, game: Game, limit: int = 10, send_results: bool = True):
    rows = compute_leaderboard(store.all_results())
    embed = game.build_leaderboard_embed(rows, store.display_names(), limit=limit)
    logger.info("post_leaderboard: %s ranked users (send=%s)", len(rows), send_results)
    if not send_results:
        _print_embed(embed)
        return embed
    await text_channel.send(embed=embed)
    return embed

async def post_player_stats(text_channel, store: ResultStore, game: Game, user_id: str, name: Optional[str] = None,
                            send_results: bool = True):
    row = summarize_user(store.results_for_user(user_id), user_id)
    embed = game.build_player_embed(row, name or user_id)
    if not send_results:
        _print_embed(embed)
        return embed
    await text_channel.send(embed=embed)
    return embed
