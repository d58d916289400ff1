"""
Player Statistics Models

Per-length records kept for each player: the result history used for
streaks, and the usage cycle of answers already played.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


@dataclass
class LengthStats:
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0
    last_played_date: Optional[str] = None
    guess_distribution: Dict[int, int] = field(default_factory=dict)

    @property
    def win_rate(self) -> int:
        if self.games_played == 0:
            return 0
        return round(self.games_won / self.games_played * 100)

    def record(self, won: bool, guesses: int, date_iso: str) -> None:
        """Fold one finished game into the totals and streaks."""
        self.games_played += 1

        if won:
            self.games_won += 1
            self.guess_distribution[guesses] = self.guess_distribution.get(guesses, 0) + 1

            if self.last_played_date is None:
                self.current_streak = 1
            else:
                gap = (date.fromisoformat(date_iso) - date.fromisoformat(self.last_played_date)).days
                if gap == 1:
                    self.current_streak += 1
                elif gap != 0:
                    self.current_streak = 1
                # same day: streak unchanged

            self.max_streak = max(self.max_streak, self.current_streak)
        else:
            self.current_streak = 0

        self.last_played_date = date_iso

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gamesPlayed": self.games_played,
            "gamesWon": self.games_won,
            "currentStreak": self.current_streak,
            "maxStreak": self.max_streak,
            "lastPlayedDate": self.last_played_date,
            "guessDistribution": {str(k): v for k, v in self.guess_distribution.items()},
            "winRate": self.win_rate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LengthStats":
        return cls(
            games_played=int(data.get("gamesPlayed", 0)),
            games_won=int(data.get("gamesWon", 0)),
            current_streak=int(data.get("currentStreak", 0)),
            max_streak=int(data.get("maxStreak", 0)),
            last_played_date=data.get("lastPlayedDate"),
            guess_distribution={int(k): int(v) for k, v in (data.get("guessDistribution") or {}).items()},
        )


@dataclass
class UsageRecord:
    """Answers already played in the current cycle for one word length."""
    used_words: List[str] = field(default_factory=list)
    cycle_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"usedWords": list(self.used_words), "cycleIndex": self.cycle_index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UsageRecord":
        return cls(
            used_words=[str(w).upper() for w in data.get("usedWords") or []],
            cycle_index=int(data.get("cycleIndex", 0)),
        )
