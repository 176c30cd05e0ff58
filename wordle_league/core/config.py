# wordle_league/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import time
from typing import Optional

from dotenv import load_dotenv


def required_env(name: str) -> str:
    v = os.environ.get(name)
    if v is None or v == "":
        raise RuntimeError(f"Missing required env var: {name}")
    return v

def _env_bool(name: str, default: bool = False) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    v = v.strip().lower()
    return v in ("1", "true", "t", "yes", "y", "on")

def _env_int(name: str, default: int) -> int:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        raise RuntimeError(f"Env var {name} must be an integer, got '{v}'")

def _parse_time(name: str, default: str) -> time:
    v = (os.environ.get(name) or default).strip()
    try:
        hour, minute = v.split(":")
        return time(int(hour), int(minute))
    except ValueError:
        raise RuntimeError(f"Env var {name} must look like HH:MM, got '{v}'")


@dataclass(frozen=True)
class Settings:
    discord_token: str
    channel_id: int
    leaderboard_channel_id: int
    # Author id of the Wordle app; None accepts any bot/app/webhook message
    wordle_bot_id: Optional[int] = None
    tz: str = "UTC"
    enable_ingest: bool = True
    send_results: bool = False
    db_path: str = "data/wordle.sqlite"
    aliases_file: str = "aliases.json"
    # "YYYY-MM-DD"; history before this date is never scanned
    catchup_since: Optional[str] = None
    leaderboard_post_time: time = time(0, 30)
    leaderboard_limit: int = 10
    member_refresh_minutes: int = 60
    log_level: str = "INFO"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load .env (if present) and build Settings from the environment.
    Raises RuntimeError for missing or malformed required values.
    """
    load_dotenv(env_file)

    channel_id = int(required_env("CHANNEL_ID"))
    bot_id = os.environ.get("WORDLE_BOT_ID")

    return Settings(
        discord_token=required_env("DISCORD_BOT_TOKEN"),
        channel_id=channel_id,
        leaderboard_channel_id=_env_int("LEADERBOARD_POST_CHANNEL_ID", channel_id),
        wordle_bot_id=int(bot_id) if bot_id else None,
        tz=os.environ.get("TZ") or "UTC",
        enable_ingest=_env_bool("ENABLE_INGEST", default=True),
        send_results=_env_bool("SEND_RESULTS", default=False),
        db_path=os.environ.get("DB_PATH") or "data/wordle.sqlite",
        aliases_file=os.environ.get("ALIASES_FILE") or "aliases.json",
        catchup_since=os.environ.get("CATCHUP_SINCE") or None,
        leaderboard_post_time=_parse_time("LEADERBOARD_POST_TIME", "00:30"),
        leaderboard_limit=_env_int("LEADERBOARD_LIMIT", 10),
        member_refresh_minutes=_env_int("MEMBER_REFRESH_MINUTES", 60),
        log_level=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
    )
