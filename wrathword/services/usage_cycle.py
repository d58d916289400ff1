"""
Usage Cycle

Keeps free-play answers from repeating: every answer of a length is played
once before any answer comes around again.
"""

import logging
from typing import List, Sequence

from ..models.errors import EmptyCatalog
from ..repositories.base import UsageRepository

logger = logging.getLogger(__name__)


class UsageCycle:
    """Per-player view over the stored usage records."""

    def __init__(self, repository: UsageRepository, player_id: str):
        self.repository = repository
        self.player_id = player_id

    def unused_words(self, length: int, answers: Sequence[str]) -> List[str]:
        """
        Answers not yet played in the current cycle, in catalog order.

        An exhausted cycle yields the full answer list, indistinguishable
        from a fresh cycle.
        """
        if not answers:
            raise EmptyCatalog(f"No answers available for length {length}")
        used = set(self.repository.load(self.player_id, length).used_words)
        unused = [word for word in answers if word.upper() not in used]
        return unused or list(answers)

    def mark_used(self, length: int, word: str, catalog_size: int) -> None:
        """Record word as played; a full cycle clears the set and advances cycle_index."""
        record = self.repository.load(self.player_id, length)
        word = word.upper()
        if word not in record.used_words:
            record.used_words.append(word)

        if len(record.used_words) >= catalog_size:
            record.used_words = []
            record.cycle_index += 1
            logger.info(f"Player {self.player_id} finished answer cycle for length {length}; "
                        f"starting cycle {record.cycle_index}")

        self.repository.save(self.player_id, length, record)

    def cycle_index(self, length: int) -> int:
        return self.repository.load(self.player_id, length).cycle_index
