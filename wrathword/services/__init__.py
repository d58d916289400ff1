"""
Services Package

Contains the puzzle engine and the service that orchestrates it.
"""

from .completion_ledger import CompletionLedger
from .daily_selector import SEED_ALGORITHM_VERSION, seeded_index, select_daily, select_free
from .game_service import GameService, get_game_service, initialize_game_service
from .game_session import GameSession
from .guess_evaluator import evaluate, is_win
from .usage_cycle import UsageCycle
from .word_catalog import WordCatalog

__all__ = [
    'CompletionLedger', 'UsageCycle', 'WordCatalog', 'GameSession',
    'evaluate', 'is_win',
    'SEED_ALGORITHM_VERSION', 'seeded_index', 'select_daily', 'select_free',
    'GameService', 'get_game_service', 'initialize_game_service',
]
