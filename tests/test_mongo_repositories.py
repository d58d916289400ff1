import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from wrathword.models.errors import PersistenceFailure
from wrathword.models.game import HintState
from wrathword.models.snapshot import SessionSnapshot
from wrathword.models.stats import LengthStats, UsageRecord
from wrathword.repositories.mongo import (
    MongoCompletionRepository, MongoGameRepository, MongoStatsRepository, MongoUsageRepository,
)


@pytest.fixture
def db():
    return mongomock.MongoClient().db


def make_snapshot(**overrides):
    fields = dict(
        length=5, max_attempts=6, mode="daily", date_iso="2025-01-15", secret="CRANE",
        guesses=["STARE"], feedback=[["absent", "absent", "correct", "present", "correct"]],
        hint=HintState(used=True, cell=(1, 0), letter="C"),
    )
    fields.update(overrides)
    return SessionSnapshot(**fields)


def test_game_snapshot_round_trip(db):
    repository = MongoGameRepository(db)
    assert repository.load("p1") is None
    assert not repository.has_saved_game("p1")

    repository.save("p1", make_snapshot())
    loaded = repository.load("p1")
    assert loaded == make_snapshot()
    assert repository.has_saved_game("p1")


def test_game_save_replaces_the_previous_snapshot(db):
    repository = MongoGameRepository(db)
    repository.save("p1", make_snapshot())
    repository.save("p1", make_snapshot(guesses=["STARE", "CRANE"], status="won"))

    assert db.game_sessions.count_documents({"player_id": "p1"}) == 1
    assert repository.load("p1").status == "won"


def test_game_clear(db):
    repository = MongoGameRepository(db)
    repository.save("p1", make_snapshot())
    repository.clear("p1")
    assert repository.load("p1") is None


def test_malformed_snapshot_reads_as_absent(db):
    repository = MongoGameRepository(db)
    db.game_sessions.insert_one({"player_id": "p1", "snapshot": {"length": 5}})
    assert repository.load("p1") is None


def test_write_errors_become_persistence_failures(db, monkeypatch):
    repository = MongoGameRepository(db)

    def unreachable(*args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(repository, "collection", type("Offline", (), {"replace_one": unreachable})())
    with pytest.raises(PersistenceFailure):
        repository.save("p1", make_snapshot())


def test_completions(db):
    repository = MongoCompletionRepository(db)
    assert not repository.is_completed("p1", 5, 6, "2025-01-15")

    repository.mark_completed("p1", 5, 6, "2025-01-15")
    repository.mark_completed("p1", 5, 6, "2025-01-15")
    repository.mark_completed("p1", 5, 7, "2025-01-14")

    assert repository.is_completed("p1", 5, 6, "2025-01-15")
    assert not repository.is_completed("p2", 5, 6, "2025-01-15")
    assert db.daily_completions.count_documents({"player_id": "p1"}) == 2
    assert repository.completed_dates("p1", 5) == ["2025-01-14", "2025-01-15"]

    repository.clear("p1", 5, 6, "2025-01-15")
    assert not repository.is_completed("p1", 5, 6, "2025-01-15")


def test_usage_records(db):
    repository = MongoUsageRepository(db)
    assert repository.load("p1", 5) == UsageRecord()

    repository.save("p1", 5, UsageRecord(used_words=["CRANE", "SPEED"], cycle_index=2))
    assert repository.load("p1", 5) == UsageRecord(used_words=["CRANE", "SPEED"], cycle_index=2)
    assert repository.load("p1", 4) == UsageRecord()


def test_stats_records(db):
    repository = MongoStatsRepository(db)
    stats = LengthStats()
    stats.record(True, 3, "2025-01-15")
    repository.save("p1", 6, stats)
    repository.save("p1", 4, LengthStats(games_played=1))

    assert repository.load("p1", 6) == stats
    all_stats = repository.load_all("p1")
    assert list(all_stats) == [4, 6]
    assert all_stats[6].guess_distribution == {3: 1}
