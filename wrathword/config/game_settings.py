"""
Game Configuration Constants Module

Game rules and the bundled word lists. Word lists are loaded and validated
once on import; a bad list fails startup rather than a later puzzle.
"""

import json
import os
from typing import Dict, Final, List, Tuple

VALID_LENGTHS: Final[Tuple[int, ...]] = (4, 5, 6)
"""Word lengths a puzzle can be played at."""

MAX_ATTEMPTS_RANGE: Final[Tuple[int, int]] = (4, 8)
"""Inclusive bounds on the number of guesses per puzzle."""

DEFAULT_LENGTH: Final[int] = 5
DEFAULT_MAX_ATTEMPTS: Final[int] = 6

WORDS_DIR: Final[str] = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'words')


def _load_json_words(path: str, length: int) -> List[str]:
    """
    Load one word list file.

    Returns:
        List[str]: Uppercase words in file order

    Raises:
        FileNotFoundError: If the file is not found
        ValueError: If the file is malformed or a word is invalid
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {os.path.basename(path)}: {e}")

    if not isinstance(word_list, list):
        raise ValueError(f"{os.path.basename(path)} must contain an array of words")

    uppercase_words = [str(word).strip().upper() for word in word_list]
    for word in uppercase_words:
        if len(word) != length:
            raise ValueError(f"Word '{word}' is not {length} characters long")
        if not word.isalpha():
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")
    return uppercase_words


def load_word_lists(words_dir: str = WORDS_DIR) -> Dict[int, Tuple[List[str], List[str]]]:
    """
    Load answers-N.json and allowed-N.json for every valid length.

    Returns:
        Dict mapping length to (answers, allowed)
    """
    lists = {}
    for length in VALID_LENGTHS:
        answers = _load_json_words(os.path.join(words_dir, f'answers-{length}.json'), length)
        allowed = _load_json_words(os.path.join(words_dir, f'allowed-{length}.json'), length)
        lists[length] = (answers, allowed)
    return lists


def validate_word_lists(lists: Dict[int, Tuple[List[str], List[str]]]) -> bool:
    """
    Validates the integrity and consistency of the word database.

    1. Every valid length has a non-empty answer list
    2. No duplicate answers
    3. Every answer is also an allowed guess

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    for length in VALID_LENGTHS:
        if length not in lists:
            raise ValueError(f"No word lists for length {length}")
        answers, allowed = lists[length]
        if not answers:
            raise ValueError(f"Answer list for length {length} cannot be empty")
        if len(answers) != len(set(answers)):
            duplicates = sorted({word for word in answers if answers.count(word) > 1})
            raise ValueError(f"Duplicate answers for length {length}: {duplicates}")
        missing = sorted(set(answers) - set(allowed))
        if missing:
            raise ValueError(f"Answers missing from allowed list for length {length}: {missing}")
    return True


def get_word_statistics(lists: Dict[int, Tuple[List[str], List[str]]]) -> dict:
    """Per-length word counts and the most common answer letters."""
    stats = {}
    for length, (answers, allowed) in lists.items():
        letter_frequency: Dict[str, int] = {}
        for word in answers:
            for char in word:
                letter_frequency[char] = letter_frequency.get(char, 0) + 1
        stats[length] = {
            "answers": len(answers),
            "allowed": len(allowed),
            "most_common_letters": sorted(letter_frequency.items(), key=lambda x: x[1], reverse=True)[:5],
        }
    return stats


# Bundled word database loaded from JSON files
WORD_LISTS: Final[Dict[int, Tuple[List[str], List[str]]]] = load_word_lists()
validate_word_lists(WORD_LISTS)
