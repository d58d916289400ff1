"""
Word Catalog

Answers and allowed guesses per word length. Loaded once and never
mutated; answers keep their file order because daily selection indexes
into it.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..config.game_settings import VALID_LENGTHS, WORD_LISTS, validate_word_lists
from ..models.errors import EmptyCatalog


class WordCatalog:

    def __init__(self, lists: Dict[int, Tuple[Iterable[str], Iterable[str]]]):
        self._answers: Dict[int, Tuple[str, ...]] = {}
        self._allowed: Dict[int, FrozenSet[str]] = {}
        for length, (answers, allowed) in lists.items():
            normalized_answers = tuple(word.strip().upper() for word in answers)
            if not normalized_answers:
                raise EmptyCatalog(f"No answers available for length {length}")
            self._answers[length] = normalized_answers
            # answers are always acceptable guesses
            self._allowed[length] = frozenset(word.strip().upper() for word in allowed) | frozenset(normalized_answers)

    @classmethod
    def from_settings(cls, lists: Optional[Dict[int, Tuple[List[str], List[str]]]] = None) -> "WordCatalog":
        """Build the catalog from the bundled word lists."""
        lists = WORD_LISTS if lists is None else lists
        validate_word_lists(lists)
        return cls(lists)

    @property
    def lengths(self) -> Tuple[int, ...]:
        return tuple(sorted(self._answers))

    def answers(self, length: int) -> Tuple[str, ...]:
        if length not in self._answers:
            raise EmptyCatalog(f"No answers available for length {length}")
        return self._answers[length]

    def answer_count(self, length: int) -> int:
        return len(self._answers.get(length, ()))

    def is_allowed(self, word: str, length: int) -> bool:
        allowed = self._allowed.get(length)
        if allowed is None:
            return False
        return word.strip().upper() in allowed

    def is_answer(self, word: str, length: int) -> bool:
        return word.strip().upper() in self._answers.get(length, ())

    def supports(self, length: int) -> bool:
        return length in VALID_LENGTHS and length in self._answers
