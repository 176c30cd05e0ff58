from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ParsedEntry:
    user_id: str
    guesses: Optional[int]
    failed: bool

    @property
    def is_handle(self) -> bool:
        # Plain handles ("@nina") still need alias resolution; mention ids are digits
        return self.user_id.startswith("@")


@dataclass(frozen=True)
class ParsedMessage:
    puzzle_number: Optional[int]
    entries: List[ParsedEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ResultRow:
    user_id: str
    puzzle_number: Optional[int]
    date_iso: str
    guesses: Optional[int]
    failed: bool
    raw: str = ""


@dataclass
class LeaderboardRow:
    user_id: str
    games_played: int = 0
    wins: int = 0
    failures: int = 0
    g1: int = 0
    g2: int = 0
    g3: int = 0
    g4: int = 0
    g5: int = 0
    g6: int = 0
    avg_guesses: Optional[float] = None
    std_dev: Optional[float] = None
    total: int = 0
    weighted_avg: float = 0.0

    def guess_counts(self) -> List[int]:
        return [self.g1, self.g2, self.g3, self.g4, self.g5, self.g6]
