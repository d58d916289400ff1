"""
Repository Interfaces

Narrow read/write contracts for the state the engine persists per player:
the active session snapshot, daily completions, answer usage cycles and
statistics. Every write replaces the whole record (last write wins).
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..models.snapshot import SessionSnapshot
from ..models.stats import LengthStats, UsageRecord


def completion_key(length: int, max_attempts: int, date_iso: str) -> str:
    """Storage key for one daily configuration, e.g. daily.5x6.2025-01-15.completed"""
    return f"daily.{length}x{max_attempts}.{date_iso}.completed"


class GameRepository(ABC):
    """One active session snapshot per player."""

    @abstractmethod
    def save(self, player_id: str, snapshot: SessionSnapshot) -> None:
        ...

    @abstractmethod
    def load(self, player_id: str) -> Optional[SessionSnapshot]:
        """Return the saved snapshot, or None if absent or unreadable."""

    @abstractmethod
    def clear(self, player_id: str) -> None:
        ...

    def has_saved_game(self, player_id: str) -> bool:
        return self.load(player_id) is not None


class CompletionRepository(ABC):
    """Write-once-true record of finished daily configurations."""

    @abstractmethod
    def is_completed(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> bool:
        ...

    @abstractmethod
    def mark_completed(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> None:
        ...

    @abstractmethod
    def clear(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> None:
        """Debug/test reset of a single entry."""

    @abstractmethod
    def completed_dates(self, player_id: str, length: int) -> List[str]:
        ...


class UsageRepository(ABC):

    @abstractmethod
    def load(self, player_id: str, length: int) -> UsageRecord:
        """Return the stored record, or a fresh one."""

    @abstractmethod
    def save(self, player_id: str, length: int, record: UsageRecord) -> None:
        ...


class StatsRepository(ABC):

    @abstractmethod
    def load(self, player_id: str, length: int) -> LengthStats:
        ...

    @abstractmethod
    def save(self, player_id: str, length: int, stats: LengthStats) -> None:
        ...

    @abstractmethod
    def load_all(self, player_id: str) -> Dict[int, LengthStats]:
        ...
