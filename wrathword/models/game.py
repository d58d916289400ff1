"""
Game Data Models

Contains the value types shared by the puzzle engine: letter states,
puzzle configuration, hint state and the client-facing game state view.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from functools import total_ordering
from typing import Dict, List, Optional, Tuple

from ..config.game_settings import (
    DEFAULT_LENGTH,
    DEFAULT_MAX_ATTEMPTS,
    MAX_ATTEMPTS_RANGE,
    VALID_LENGTHS,
)
from .errors import InvalidConfig

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@total_ordering
class LetterState(Enum):
    """
    Evaluation of a single letter position.

    Totally ordered ABSENT < PRESENT < CORRECT so that the keyboard
    aggregate can keep the best state seen for each letter.
    """
    ABSENT = "absent"
    PRESENT = "present"
    CORRECT = "correct"

    @property
    def rank(self) -> int:
        return _LETTER_RANK[self]

    @property
    def emoji(self) -> str:
        return _LETTER_EMOJI[self]

    def __lt__(self, other):
        if not isinstance(other, LetterState):
            return NotImplemented
        return self.rank < other.rank


_LETTER_RANK = {
    LetterState.ABSENT: 0,
    LetterState.PRESENT: 1,
    LetterState.CORRECT: 2,
}

_LETTER_EMOJI = {
    LetterState.ABSENT: "⬛",
    LetterState.PRESENT: "🟨",
    LetterState.CORRECT: "🟩",
}

# One LetterState per position of a submitted guess
Feedback = Tuple[LetterState, ...]


class GameMode(Enum):
    DAILY = "daily"
    FREE = "free"


class GameStatus(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.PLAYING


def validate_date_iso(date_iso: str) -> str:
    """Check a YYYY-MM-DD calendar date and return it unchanged."""
    if not isinstance(date_iso, str) or not _DATE_PATTERN.match(date_iso):
        raise InvalidConfig(f"date must be YYYY-MM-DD, got: {date_iso!r}")
    try:
        date.fromisoformat(date_iso)
    except ValueError:
        raise InvalidConfig(f"date is not a calendar date: {date_iso}")
    return date_iso


@dataclass(frozen=True)
class PuzzleConfig:
    """Immutable puzzle configuration: word length, attempts, mode and date."""
    length: int
    max_attempts: int
    mode: GameMode
    date_iso: str

    def __post_init__(self):
        if isinstance(self.mode, str):
            try:
                object.__setattr__(self, "mode", GameMode(self.mode))
            except ValueError:
                raise InvalidConfig(f"Invalid game mode: {self.mode}. Must be 'daily' or 'free'")
        if not isinstance(self.mode, GameMode):
            raise InvalidConfig(f"Invalid game mode: {self.mode!r}")
        if self.length not in VALID_LENGTHS:
            raise InvalidConfig(
                f"Invalid word length: {self.length}. Must be one of {', '.join(map(str, VALID_LENGTHS))}"
            )
        low, high = MAX_ATTEMPTS_RANGE
        if not isinstance(self.max_attempts, int) or not low <= self.max_attempts <= high:
            raise InvalidConfig(f"max_attempts must be between {low} and {high}, got: {self.max_attempts}")
        validate_date_iso(self.date_iso)

    @classmethod
    def default(cls, date_iso: str) -> "PuzzleConfig":
        return cls(DEFAULT_LENGTH, DEFAULT_MAX_ATTEMPTS, GameMode.DAILY, date_iso)

    @property
    def is_daily(self) -> bool:
        return self.mode is GameMode.DAILY

    def seed_string(self) -> str:
        """Seed for daily selection. max_attempts is part of the seed."""
        return f"{self.date_iso}:{self.length}:{self.max_attempts}"

    def with_mode(self, mode: GameMode) -> "PuzzleConfig":
        return PuzzleConfig(self.length, self.max_attempts, mode, self.date_iso)

    def matches(self, other: "PuzzleConfig") -> bool:
        """Same puzzle shape, ignoring the date."""
        return (
            self.length == other.length
            and self.max_attempts == other.max_attempts
            and self.mode is other.mode
        )


@dataclass(frozen=True)
class HintState:
    """Single-use hint. used implies cell and letter are both set."""
    used: bool = False
    cell: Optional[Tuple[int, int]] = None
    letter: Optional[str] = None


@dataclass
class GameState:
    """Client-facing view of a session (the secret is hidden while playing)."""
    length: int
    max_attempts: int
    mode: str
    date_iso: str
    status: str
    current_row: int
    remaining_attempts: int
    guesses: List[str]
    feedback: List[List[str]]
    keyboard: Dict[str, str]
    hint: Dict = field(default_factory=dict)
    hint_available: bool = False
    answer: Optional[str] = None
