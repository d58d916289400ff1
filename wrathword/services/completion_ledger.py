"""
Completion Ledger

Remembers which daily configurations a player has finished so a solved
daily puzzle cannot be replayed under the same identity. maxAttempts is part
of the key because it is part of the daily seed.
"""

from typing import List

from ..models.game import PuzzleConfig
from ..repositories.base import CompletionRepository


class CompletionLedger:

    def __init__(self, repository: CompletionRepository, player_id: str):
        self.repository = repository
        self.player_id = player_id

    def is_daily_completed(self, length: int, max_attempts: int, date_iso: str) -> bool:
        return self.repository.is_completed(self.player_id, length, max_attempts, date_iso)

    def mark_daily_completed(self, length: int, max_attempts: int, date_iso: str) -> None:
        """Idempotent; an entry once set is never reverted here."""
        if not self.is_daily_completed(length, max_attempts, date_iso):
            self.repository.mark_completed(self.player_id, length, max_attempts, date_iso)

    def is_config_completed(self, config: PuzzleConfig) -> bool:
        return config.is_daily and self.is_daily_completed(config.length, config.max_attempts, config.date_iso)

    def completed_dates(self, length: int) -> List[str]:
        return self.repository.completed_dates(self.player_id, length)

    def clear(self, length: int, max_attempts: int, date_iso: str) -> None:
        """Debug reset only."""
        self.repository.clear(self.player_id, length, max_attempts, date_iso)
