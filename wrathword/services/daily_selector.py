"""
deterministic secret word selection based on date.

the seed string "{date}:{length}:{max_attempts}" is hashed with 32-bit
FNV-1a, fed to one draw of mulberry32, and scaled onto the candidate list.
same date + config -> same word, no matter where/when it runs.

every bit of this is a stored contract: any change reshuffles every past
and future daily answer. bump SEED_ALGORITHM_VERSION if it ever changes.
"""

import random
from typing import Optional, Sequence

from ..models.errors import EmptyCatalog
from ..models.game import validate_date_iso

SEED_ALGORITHM_VERSION = 1

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619
_MULBERRY_INCREMENT = 0x6D2B79F5


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of text."""
    h = _FNV_OFFSET_BASIS
    units = text.encode("utf-16-le")
    for i in range(0, len(units), 2):
        h ^= units[i] | (units[i + 1] << 8)
        h = (h * _FNV_PRIME) & _MASK32
    return h


def mulberry32_first(seed: int) -> int:
    """first 32-bit output of mulberry32 seeded with seed."""
    t = (seed + _MULBERRY_INCREMENT) & _MASK32
    t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
    t = (t ^ ((t + (((t ^ (t >> 7)) * (t | 61)) & _MASK32)) & _MASK32)) & _MASK32
    return (t ^ (t >> 14)) & _MASK32


def seeded_index(seed_string: str, size: int) -> int:
    """
    map a seed string onto [0, size).

    floor(u / 2**32 * size) computed exactly in integers.
    """
    if size <= 0:
        raise EmptyCatalog("cannot pick from zero candidates")
    u = mulberry32_first(fnv1a_32(seed_string))
    return (u * size) >> 32


def daily_seed_string(length: int, max_attempts: int, date_iso: str) -> str:
    return f"{date_iso}:{length}:{max_attempts}"


def select_daily(length: int, max_attempts: int, date_iso: str, candidates: Sequence[str]) -> str:
    """
    pick the daily word for a config.

    args:
        length: word length
        max_attempts: guesses allowed (part of the seed)
        date_iso: date in YYYY-MM-DD format
        candidates: non-empty ordered answer list

    returns:
        the chosen candidate
    """
    if not candidates:
        raise EmptyCatalog(f"no candidates for length {length}")
    validate_date_iso(date_iso)
    return candidates[seeded_index(daily_seed_string(length, max_attempts, date_iso), len(candidates))]


def select_free(candidates: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """uniform pick, no reproducibility."""
    if not candidates:
        raise EmptyCatalog("no candidates for free play")
    return (rng or random).choice(list(candidates))
