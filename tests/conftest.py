import random
from datetime import datetime, timezone

import pytest

from wrathword import create_app
from wrathword.config import TestingConfig
from wrathword.models.game import GameMode, PuzzleConfig
from wrathword.repositories.memory import (
    InMemoryCompletionRepository, InMemoryGameRepository, InMemoryStatsRepository, InMemoryUsageRepository,
)
from wrathword.services import game_service as game_service_module
from wrathword.services.game_service import GameService
from wrathword.services.word_catalog import WordCatalog

TODAY = "2025-01-15"
YESTERDAY = "2025-01-14"

SMALL_LISTS = {
    4: (["BEAR", "BIRD", "BOAT"], ["BEAR", "BIRD", "BOAT", "BEAM", "BOLD"]),
    5: (
        ["CRANE", "SPEED", "ALLOY", "LEMON"],
        ["CRANE", "SPEED", "ALLOY", "LEMON", "STARE", "ERASE", "LLAMA", "TRACE", "RAISE",
         "CRATE", "PLANT", "AUDIO", "ADIEU", "SLATE"],
    ),
    6: (["GARDEN", "PLANET"], ["GARDEN", "PLANET", "SILVER"]),
}


@pytest.fixture
def catalog():
    return WordCatalog(SMALL_LISTS)


@pytest.fixture(scope="session")
def full_catalog():
    return WordCatalog.from_settings()


@pytest.fixture
def daily_config():
    return PuzzleConfig(5, 6, GameMode.DAILY, TODAY)


@pytest.fixture
def free_config():
    return PuzzleConfig(5, 6, GameMode.FREE, TODAY)


@pytest.fixture
def repositories():
    return {
        "game": InMemoryGameRepository(),
        "completion": InMemoryCompletionRepository(),
        "usage": InMemoryUsageRepository(),
        "stats": InMemoryStatsRepository(),
    }


@pytest.fixture
def clock():
    class Clock:
        today = TODAY
        # early morning UTC: yesterday is still current west of UTC-5
        instant = datetime(2025, 1, 15, 5, 0, tzinfo=timezone.utc)

        def __call__(self):
            return self.today

        def now(self):
            return self.instant

    return Clock()


@pytest.fixture
def service(catalog, repositories, clock):
    return GameService(
        catalog,
        repositories["game"],
        repositories["completion"],
        repositories["usage"],
        repositories["stats"],
        clock=clock,
        rng=random.Random(7),
        now=clock.now,
    )


@pytest.fixture
def app(service, monkeypatch):
    monkeypatch.setattr(game_service_module, "_game_service", service)
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()
