"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules and word lists (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    DEFAULT_LENGTH, DEFAULT_MAX_ATTEMPTS, MAX_ATTEMPTS_RANGE, VALID_LENGTHS, WORD_LISTS,
    get_word_statistics, load_word_lists, validate_word_lists,
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'VALID_LENGTHS', 'MAX_ATTEMPTS_RANGE', 'DEFAULT_LENGTH', 'DEFAULT_MAX_ATTEMPTS',
    'WORD_LISTS', 'load_word_lists', 'validate_word_lists', 'get_word_statistics',
]
