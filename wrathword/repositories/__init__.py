"""
Repositories Package

Persistence contracts for player state with in-memory and MongoDB backends.
"""

from .base import CompletionRepository, GameRepository, StatsRepository, UsageRepository, completion_key
from .memory import (
    InMemoryCompletionRepository, InMemoryGameRepository, InMemoryStatsRepository, InMemoryUsageRepository,
)

__all__ = [
    'GameRepository', 'CompletionRepository', 'UsageRepository', 'StatsRepository', 'completion_key',
    'InMemoryGameRepository', 'InMemoryCompletionRepository', 'InMemoryUsageRepository', 'InMemoryStatsRepository',
]
