"""
In-memory repositories.

Records are stored in their serialized dict form so that reads always go
through the same from_dict path as durable storage.
"""

from typing import Dict, List, Optional, Tuple

from ..models.snapshot import SessionSnapshot
from ..models.stats import LengthStats, UsageRecord
from .base import CompletionRepository, GameRepository, StatsRepository, UsageRepository, completion_key


class InMemoryGameRepository(GameRepository):

    def __init__(self):
        self.records: Dict[str, dict] = {}

    def save(self, player_id: str, snapshot: SessionSnapshot) -> None:
        self.records[player_id] = snapshot.to_dict()

    def load(self, player_id: str) -> Optional[SessionSnapshot]:
        record = self.records.get(player_id)
        if record is None:
            return None
        try:
            return SessionSnapshot.from_dict(record)
        except (KeyError, TypeError, ValueError):
            return None

    def clear(self, player_id: str) -> None:
        self.records.pop(player_id, None)


class InMemoryCompletionRepository(CompletionRepository):

    def __init__(self):
        self.records: Dict[Tuple[str, str], bool] = {}

    def is_completed(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> bool:
        return self.records.get((player_id, completion_key(length, max_attempts, date_iso)), False)

    def mark_completed(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> None:
        self.records[(player_id, completion_key(length, max_attempts, date_iso))] = True

    def clear(self, player_id: str, length: int, max_attempts: int, date_iso: str) -> None:
        self.records.pop((player_id, completion_key(length, max_attempts, date_iso)), None)

    def completed_dates(self, player_id: str, length: int) -> List[str]:
        prefix = f"daily.{length}x"
        dates = {
            key.split(".")[2]
            for (owner, key), done in self.records.items()
            if owner == player_id and done and key.startswith(prefix)
        }
        return sorted(dates)


class InMemoryUsageRepository(UsageRepository):

    def __init__(self):
        self.records: Dict[Tuple[str, int], dict] = {}

    def load(self, player_id: str, length: int) -> UsageRecord:
        return UsageRecord.from_dict(self.records.get((player_id, length), {}))

    def save(self, player_id: str, length: int, record: UsageRecord) -> None:
        self.records[(player_id, length)] = record.to_dict()


class InMemoryStatsRepository(StatsRepository):

    def __init__(self):
        self.records: Dict[Tuple[str, int], dict] = {}

    def load(self, player_id: str, length: int) -> LengthStats:
        return LengthStats.from_dict(self.records.get((player_id, length), {}))

    def save(self, player_id: str, length: int, stats: LengthStats) -> None:
        self.records[(player_id, length)] = stats.to_dict()

    def load_all(self, player_id: str) -> Dict[int, LengthStats]:
        return {
            length: LengthStats.from_dict(record)
            for (owner, length), record in sorted(self.records.items())
            if owner == player_id
        }
