import random

import pytest

from conftest import TODAY, YESTERDAY
from wrathword.models.errors import InvalidConfig, NoActiveGame, PersistenceFailure
from wrathword.models.game import GameMode, GameStatus
from wrathword.repositories.memory import (
    InMemoryCompletionRepository, InMemoryGameRepository, InMemoryUsageRepository,
)
from wrathword.services.daily_selector import select_daily
from wrathword.services.game_service import GameService


class FailingGameRepository(InMemoryGameRepository):

    def save(self, player_id, snapshot):
        raise PersistenceFailure("storage offline")


class FailingCompletionRepository(InMemoryCompletionRepository):

    def mark_completed(self, player_id, length, max_attempts, date_iso):
        raise PersistenceFailure("storage offline")


class FailingUsageRepository(InMemoryUsageRepository):

    def save(self, player_id, length, record):
        raise PersistenceFailure("storage offline")


def win(service, player_id):
    return service.submit_guess(player_id, service.get_session(player_id).secret)


def make_service(catalog, repositories, clock, game_repository=None, completion_repository=None,
                 usage_repository=None):
    return GameService(
        catalog,
        game_repository or repositories["game"],
        completion_repository or repositories["completion"],
        usage_repository or repositories["usage"],
        repositories["stats"],
        clock=clock,
        rng=random.Random(11),
    )


def test_new_daily_uses_the_shared_word(service, catalog, repositories):
    result = service.start_game("p1")

    assert result.outcome == "new_game"
    assert result.persisted
    assert not result.fell_back_to_free
    session = result.session
    assert session.config.mode is GameMode.DAILY
    assert session.date_iso == TODAY
    assert session.secret == select_daily(5, 6, TODAY, catalog.answers(5))
    assert repositories["game"].records["p1"]["secret"] == session.secret


def test_every_player_gets_the_same_daily(service):
    first = service.start_game("p1").session.secret
    assert service.start_game("p2").session.secret == first


def test_starting_again_restores_progress(service):
    session = service.start_game("p1").session
    service.submit_guess("p1", "STARE")

    result = service.start_game("p1")
    assert result.outcome == "restored"
    assert result.session is session
    assert result.session.guesses == ("STARE",)


def test_progress_survives_a_restart(service, catalog, repositories, clock):
    service.start_game("p1")
    service.submit_guess("p1", "STARE")
    service.use_hint("p1")

    restarted = make_service(catalog, repositories, clock)
    session = restarted.get_session("p1")
    assert session.guesses == ("STARE",)
    assert session.hint.used
    assert restarted.start_game("p1").outcome == "restored"


def test_solved_daily_falls_back_to_free_play(service):
    service.start_game("p1")
    win(service, "p1")
    assert service.ledger("p1").is_daily_completed(5, 6, TODAY)

    result = service.start_game("p1")
    assert result.outcome == "new_game"
    assert result.fell_back_to_free
    assert result.session.config.mode is GameMode.FREE


def test_other_daily_shapes_remain_playable(service):
    service.start_game("p1")
    win(service, "p1")

    result = service.start_game("p1", max_attempts=7)
    assert not result.fell_back_to_free
    assert result.session.config.is_daily


def test_free_play_cycles_through_every_answer(service, catalog):
    secrets = []
    for _ in catalog.answers(5):
        result = service.start_game("p1", mode="free")
        assert result.outcome == "new_game"
        secrets.append(result.session.secret)
        win(service, "p1")

    assert sorted(secrets) == sorted(catalog.answers(5))
    assert service.usage_cycle("p1").cycle_index(5) == 1


def test_unfinished_daily_from_yesterday_is_surfaced(service, repositories):
    service.start_game("p1", date_iso=YESTERDAY)
    service.submit_guess("p1", "STARE")

    result = service.start_game("p1")
    assert result.outcome == "stale_game"
    assert result.today == TODAY
    assert result.session.date_iso == YESTERDAY
    assert repositories["game"].records["p1"]["dateISO"] == YESTERDAY


def test_finishing_a_stale_daily(service):
    service.start_game("p1", date_iso=YESTERDAY)
    service.submit_guess("p1", "STARE")
    service.start_game("p1")

    result = service.resolve_stale("p1", "finish")
    assert result.outcome == "restored"
    assert result.session.date_iso == YESTERDAY

    win(service, "p1")
    assert service.ledger("p1").is_daily_completed(5, 6, YESTERDAY)


def test_starting_today_instead_of_a_stale_daily(service, repositories):
    service.start_game("p1", date_iso=YESTERDAY)
    service.submit_guess("p1", "STARE")
    service.start_game("p1")

    result = service.resolve_stale("p1", "start_today")
    assert result.outcome == "new_game"
    assert result.session.date_iso == TODAY
    assert result.session.config.is_daily
    assert result.session.current_row == 0
    assert service.ledger("p1").is_daily_completed(5, 6, YESTERDAY)
    assert repositories["game"].records["p1"]["dateISO"] == TODAY


def test_untouched_daily_from_yesterday_is_replaced(service):
    service.start_game("p1", date_iso=YESTERDAY)

    result = service.start_game("p1")
    assert result.outcome == "new_game"
    assert result.session.date_iso == TODAY
    assert not service.ledger("p1").is_daily_completed(5, 6, YESTERDAY)


def test_resolve_stale_rejects_unknown_choice(service):
    with pytest.raises(InvalidConfig):
        service.resolve_stale("p1", "later")


def test_resolve_stale_without_a_stale_game(service):
    service.start_game("p1")
    with pytest.raises(NoActiveGame):
        service.resolve_stale("p1", "finish")


def test_changing_shape_abandons_a_daily_in_progress(service):
    service.start_game("p1")
    service.submit_guess("p1", "STARE")

    result = service.start_game("p1", length=4)
    assert result.outcome == "new_game"
    assert result.session.config.length == 4
    assert service.ledger("p1").is_daily_completed(5, 6, TODAY)


def test_changing_shape_without_progress_keeps_daily_open(service):
    service.start_game("p1")
    result = service.start_game("p1", mode="free")
    assert result.session.config.mode is GameMode.FREE
    assert not service.ledger("p1").is_daily_completed(5, 6, TODAY)


@pytest.mark.parametrize("kwargs", [
    {"length": 7},
    {"max_attempts": 3},
    {"max_attempts": 9},
    {"mode": "weekly"},
    {"date_iso": "2025-13-01"},
])
def test_invalid_configs_are_rejected(service, kwargs):
    with pytest.raises(InvalidConfig):
        service.start_game("p1", **kwargs)


def test_guess_without_a_game(service):
    with pytest.raises(NoActiveGame):
        service.submit_guess("nobody", "CRANE")


def test_abandoning_a_daily_marks_it_completed(service):
    service.start_game("p1")
    service.submit_guess("p1", "STARE")

    info = service.abandon_game("p1")
    assert info == {
        "guessCount": 1,
        "hintWasUsed": False,
        "mode": "daily",
        "dateISO": TODAY,
        "length": 5,
        "maxAttempts": 6,
    }
    with pytest.raises(NoActiveGame):
        service.get_session("p1")
    assert service.start_game("p1").fell_back_to_free


def test_abandoning_nothing(service):
    assert service.abandon_game("p1") is None


def test_unreadable_snapshot_starts_fresh(service, repositories):
    repositories["game"].records["p1"] = {
        "length": 5, "maxAttempts": 6, "mode": "daily", "dateISO": TODAY, "secret": "GARDEN",
    }
    assert service.start_game("p1").outcome == "new_game"


def test_storage_failure_keeps_playing_in_memory(catalog, repositories, clock):
    service = make_service(catalog, repositories, clock, game_repository=FailingGameRepository())

    result = service.start_game("p1")
    assert result.outcome == "new_game"
    assert not result.persisted
    assert service.has_unsaved_progress("p1")

    guess = service.submit_guess("p1", "STARE")
    assert not guess.persisted
    assert service.get_session("p1").guesses == ("STARE",)


def test_hint_is_saved(service, repositories):
    service.start_game("p1")
    result = service.use_hint("p1")

    assert result.persisted
    assert result.row == 0
    assert result.letter == result.session.secret[result.col]
    assert repositories["game"].records["p1"]["hint"]["cell"] == [0, result.col]


def test_stats_record_wins_and_losses(service):
    service.start_game("p1")
    win(service, "p1")

    service.start_game("p1", max_attempts=4, mode="free")
    for guess in ("STARE", "SLATE", "AUDIO", "RAISE"):
        service.submit_guess("p1", guess)
    assert service.get_session("p1").status is GameStatus.LOST

    stats = service.get_stats("p1")
    assert stats["totals"] == {
        "played": 2,
        "won": 1,
        "winRate": 50,
        "currentStreak": 0,
        "maxStreak": 1,
    }
    assert stats["lengths"]["5"]["guessDistribution"] == {"1": 1}


def test_stats_for_a_new_player(service):
    assert service.get_stats("p1") == {
        "lengths": {},
        "totals": {"played": 0, "won": 0, "winRate": 0, "currentStreak": 0, "maxStreak": 0},
    }


def test_solved_daily_stays_solved_when_the_ledger_write_fails(catalog, repositories, clock):
    service = make_service(catalog, repositories, clock, completion_repository=FailingCompletionRepository())
    service.start_game("p1")

    result = win(service, "p1")
    assert not result.persisted
    assert service.has_unsaved_progress("p1")
    # the other records are still written
    assert service.get_stats("p1")["totals"]["won"] == 1

    again = service.start_game("p1")
    assert again.fell_back_to_free
    assert again.session.config.mode is GameMode.FREE


def test_solved_daily_stays_solved_when_the_usage_write_fails(catalog, repositories, clock):
    service = make_service(catalog, repositories, clock, usage_repository=FailingUsageRepository())
    service.start_game("p1")

    result = win(service, "p1")
    assert not result.persisted
    assert service.ledger("p1").is_daily_completed(5, 6, TODAY)
    assert service.get_stats("p1")["totals"]["played"] == 1

    assert service.start_game("p1").fell_back_to_free


def test_abandoned_daily_stays_closed_when_the_ledger_write_fails(catalog, repositories, clock):
    service = make_service(catalog, repositories, clock, completion_repository=FailingCompletionRepository())
    service.start_game("p1")
    service.submit_guess("p1", "STARE")

    assert service.abandon_game("p1")["guessCount"] == 1
    assert service.start_game("p1").fell_back_to_free


def test_finished_game_leaves_memory_once_stored(service):
    service.start_game("p1")
    win(service, "p1")

    assert "p1" not in service.sessions
    assert service.get_session("p1").status is GameStatus.WON


def test_finished_game_stays_in_memory_when_unsaved(catalog, repositories, clock):
    service = make_service(catalog, repositories, clock, completion_repository=FailingCompletionRepository())
    service.start_game("p1")
    win(service, "p1")

    assert service.sessions["p1"].status is GameStatus.WON


def test_playing_on_a_stale_daily_drops_the_pending_choice(service):
    service.start_game("p1", date_iso=YESTERDAY)
    service.submit_guess("p1", "STARE")
    assert service.start_game("p1", length=4).outcome == "stale_game"
    assert "p1" in service._pending_configs

    service.submit_guess("p1", "SLATE")
    assert "p1" not in service._pending_configs

    # start_today still works, in the stale game's shape
    result = service.resolve_stale("p1", "start_today")
    assert result.session.config.length == 5
    assert result.session.date_iso == TODAY
