import re
import logging
from typing import Callable, List, Optional, Tuple

from wordle_league.core.models import ParsedEntry, ParsedMessage

logger = logging.getLogger(__name__)

# Daily group summary posted by the Wordle app, e.g.
#   "Your group is on a 3 day streak! 🔥 Here are yesterday's results:"
#   "👑 3/6: <@123> <@456>"
#   "X/6: @Zahir Hassan"
CROWN_PREFIX = re.compile(r'^\s*\U0001F451\s*')
TITLE_PATTERN = re.compile(r'Wordle\s+No\.\s*(?P<number>\d+)', re.IGNORECASE)
WIN_PATTERN = re.compile(r'(?:^|\s)(?P<guesses>[1-6])/6\s*:\s*')
FAIL_PATTERN = re.compile(r'(?:^|\s)X/6\s*:\s*', re.IGNORECASE)
MENTION_PATTERN = re.compile(r'<@!?(?P<id>\d+)>')
# Plain names may contain spaces ("@Zahir Hassan"), so a handle runs until the next "@"
HANDLE_PATTERN = re.compile(r'@(?P<handle>[^@\n]+)')


def _structured_mentions(line: str) -> List[str]:
    return [m.group("id") for m in MENTION_PATTERN.finditer(line)]


def _plain_handles(line: str) -> List[str]:
    handles = []
    for m in HANDLE_PATTERN.finditer(line):
        handle = m.group("handle").strip().lower()
        if handle:
            handles.append(f"@{handle}")
    return handles


# Tried in order; the first strategy that finds anything wins for that line.
ID_EXTRACTORS: Tuple[Callable[[str], List[str]], ...] = (
    _structured_mentions,
    _plain_handles,
)


def extract_user_ids(line: str) -> List[str]:
    for extractor in ID_EXTRACTORS:
        ids = extractor(line)
        if ids:
            return ids
    return []


def classify_line(line: str) -> Optional[Tuple[Optional[int], bool]]:
    """
    Return (guesses, failed) for a score line, or None if the line carries no score.
    Win lines are checked first: "3/6:" -> (3, False), "X/6:" -> (None, True).
    """
    win = WIN_PATTERN.search(line)
    if win:
        return int(win.group("guesses")), False
    if FAIL_PATTERN.search(line):
        return None, True
    return None


def parse_summary(text: str) -> Optional[ParsedMessage]:
    """
    Parse a Wordle group summary into a ParsedMessage.

    Returns None when no score line with at least one user could be found.
    Every line is matched independently, so nothing carries over between lines
    or calls apart from the puzzle number (the last "Wordle No. N" wins).
    """
    if not text:
        return None

    puzzle_number: Optional[int] = None
    entries: List[ParsedEntry] = []

    for raw_line in text.splitlines():
        line = CROWN_PREFIX.sub("", raw_line.strip())

        # Later titles override earlier ones, on the same line too
        for title in TITLE_PATTERN.finditer(line):
            puzzle_number = int(title.group("number"))

        classified = classify_line(line)
        if classified is None:
            continue
        guesses, failed = classified

        ids = extract_user_ids(line)
        if not ids:
            logger.debug("parse_summary: score line without users: '%s'", line[:80])
            continue
        for user_id in ids:
            entries.append(ParsedEntry(user_id=user_id, guesses=guesses, failed=failed))

    if not entries:
        return None

    logger.debug("parse_summary: %s entries, puzzle=%s", len(entries), puzzle_number)
    return ParsedMessage(puzzle_number=puzzle_number, entries=entries)
