"""
Admin command line for the Wordle league database.

Usage:
    wordle-league parse [FILE]
    wordle-league clean [--keep-players] [--drop-aliases] [--vacuum]
    wordle-league aliases list | add HANDLE USER_ID | remove HANDLE | seed FILE
    wordle-league leaderboard [--limit N]
"""
import argparse
import logging
import os
import sqlite3
import sys
from typing import List, Optional

from dotenv import load_dotenv

from wordle_league.core.leaderboard import compute_leaderboard
from wordle_league.core.store import ResultStore
from wordle_league.wordle.game import display_for, fmt_num
from wordle_league.wordle.parser import parse_summary

logger = logging.getLogger(__name__)


def cmd_parse(args, out) -> int:
    if args.file:
        with open(args.file, encoding="utf-8") as fh:
            text = fh.read()
    else:
        text = sys.stdin.read()
    parsed = parse_summary(text)
    if parsed is None:
        print("no results found", file=out)
        return 1
    print(f"puzzle: {parsed.puzzle_number if parsed.puzzle_number is not None else '?'}", file=out)
    for e in parsed.entries:
        print(f"  {e.user_id}: {'X' if e.failed else e.guesses}/6", file=out)
    return 0


def cmd_clean(args, out) -> int:
    store = ResultStore.open(args.db)
    try:
        print(f"Before: {store.counts()}", file=out)
        store.clear(keep_players=args.keep_players, drop_aliases=args.drop_aliases, vacuum=args.vacuum)
        print(f"After: {store.counts()}", file=out)
    finally:
        store.close()
    return 0


def cmd_aliases(args, out) -> int:
    store = ResultStore.open(args.db)
    try:
        if args.action == "list":
            for handle, user_id in store.list_aliases().items():
                print(f"{handle} -> {user_id}", file=out)
        elif args.action == "add":
            store.set_alias(args.handle, args.user_id)
            print(f"added {args.handle} -> {args.user_id}", file=out)
        elif args.action == "remove":
            if not store.remove_alias(args.handle):
                print(f"no alias {args.handle}", file=out)
                return 1
        elif args.action == "seed":
            print(f"seeded {store.seed_aliases(args.file)} aliases", file=out)
    finally:
        store.close()
    return 0


def cmd_leaderboard(args, out) -> int:
    store = ResultStore.open(args.db)
    try:
        rows = compute_leaderboard(store.all_results())
        names = store.display_names()
    finally:
        store.close()
    if not rows:
        print("No results yet.", file=out)
        return 0
    print(f"{'#':>3}  {'player':<24} {'score':>6} {'games':>5} {'wins':>4} {'X':>3} {'avg':>5} {'sd':>5}", file=out)
    for idx, r in enumerate(rows[:args.limit], start=1):
        print(
            f"{idx:>3}  {display_for(r.user_id, names):<24} {fmt_num(r.weighted_avg):>6} {r.games_played:>5} "
            f"{r.wins:>4} {r.failures:>3} {fmt_num(r.avg_guesses):>5} {fmt_num(r.std_dev):>5}",
            file=out,
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="wordle-league", description="Wordle league admin tools.")
    ap.add_argument("--db", default=None, help="SQLite database path (default: $DB_PATH or data/wordle.sqlite)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Parse a summary message from FILE or stdin.")
    p.add_argument("file", nargs="?")
    p.set_defaults(func=cmd_parse)

    p = sub.add_parser("clean", help="Delete stored results and games.")
    p.add_argument("--keep-players", action="store_true")
    p.add_argument("--drop-aliases", action="store_true")
    p.add_argument("--vacuum", action="store_true")
    p.set_defaults(func=cmd_clean)

    p = sub.add_parser("aliases", help="Manage handle -> user id aliases.")
    actions = p.add_subparsers(dest="action", required=True)
    actions.add_parser("list")
    a = actions.add_parser("add")
    a.add_argument("handle")
    a.add_argument("user_id")
    a = actions.add_parser("remove")
    a.add_argument("handle")
    a = actions.add_parser("seed")
    a.add_argument("file")
    p.set_defaults(func=cmd_aliases)

    p = sub.add_parser("leaderboard", help="Print the current leaderboard.")
    p.add_argument("--limit", type=int, default=10)
    p.set_defaults(func=cmd_leaderboard)
    return ap


def main(argv: Optional[List[str]] = None, out=None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, (os.environ.get("LOG_LEVEL") or "WARNING").upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    args = build_parser().parse_args(argv)
    args.db = args.db or os.environ.get("DB_PATH") or "data/wordle.sqlite"
    out = out or sys.stdout
    try:
        return args.func(args, out)
    except (OSError, ValueError, sqlite3.Error) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
