from datetime import date, datetime, timezone

import pytest

from conftest import TODAY, YESTERDAY
from wrathword.services import game_service as game_service_module
from wrathword.utils.helpers import current_local_dates


def start(client, player_id="p1", **body):
    return client.post(f"/api/players/{player_id}/game", json=body)


def guess(client, word, player_id="p1"):
    return client.post(f"/api/players/{player_id}/game/guess", json={"guess": word})


def test_start_daily(client):
    response = start(client)
    assert response.status_code == 200

    data = response.get_json()
    assert data["success"]
    assert data["outcome"] == "new_game"
    assert data["fell_back_to_free"] is False
    assert data["persisted"] is True
    assert data["state"]["mode"] == "daily"
    assert data["state"]["date_iso"] == TODAY
    assert data["state"]["answer"] is None


def test_guess_feedback(client):
    start(client)
    data = guess(client, "stare").get_json()
    assert data["success"]
    assert len(data["feedback"]) == 5
    assert data["state"]["current_row"] == 1
    assert data["state"]["remaining_attempts"] == 5


def test_winning_reveals_answer_and_share_text(client, service):
    start(client)
    secret = service.get_session("p1").secret

    data = guess(client, secret.lower()).get_json()
    assert data["state"]["status"] == "won"
    assert data["state"]["answer"] == secret
    assert data["feedback"] == ["correct"] * 5
    assert data["share_text"].startswith("WrathWord 5×6\nJan 15, 2025\n1/6")
    assert data["result_title"] == "Incredible!"

    response = guess(client, secret)
    assert response.status_code == 409
    assert response.get_json()["code"] == "game_over"


@pytest.mark.parametrize("word, code", [
    ("cran", "invalid_length"),
    ("zzzzz", "not_in_word_list"),
])
def test_rejected_guesses(client, word, code):
    start(client)
    response = guess(client, word)
    assert response.status_code == 400
    assert response.get_json() == {"success": False, "code": code, "error": response.get_json()["error"]}


def test_guess_requires_a_body(client):
    start(client)
    response = client.post("/api/players/p1/game/guess", json={})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Guess is required"


def test_no_active_game(client):
    response = client.get("/api/players/nobody/game")
    assert response.status_code == 404
    assert response.get_json()["code"] == "no_active_game"


def test_get_state(client):
    start(client)
    guess(client, "stare")
    data = client.get("/api/players/p1/game").get_json()
    assert data["state"]["guesses"] == ["STARE"]


def test_hint_once(client, service):
    start(client)
    response = client.post("/api/players/p1/game/hint")
    assert response.status_code == 200

    hint = response.get_json()["hint"]
    assert hint["row"] == 0
    assert hint["letter"] == service.get_session("p1").secret[hint["col"]]

    again = client.post("/api/players/p1/game/hint")
    assert again.status_code == 409
    assert again.get_json()["code"] == "hint_unavailable"


def test_stale_daily_then_start_today(client):
    start(client, date=YESTERDAY)
    guess(client, "stare")

    data = start(client).get_json()
    assert data["outcome"] == "stale_game"
    assert data["today"] == TODAY
    assert data["stale"]["date_iso"] == YESTERDAY
    assert data["choices"] == ["finish", "start_today"]

    data = client.post("/api/players/p1/game/stale", json={"choice": "start_today"}).get_json()
    assert data["outcome"] == "new_game"
    assert data["state"]["date_iso"] == TODAY
    assert data["state"]["guesses"] == []


def test_stale_daily_finish(client):
    start(client, date=YESTERDAY)
    guess(client, "stare")
    start(client)

    data = client.post("/api/players/p1/game/stale", json={"choice": "finish"}).get_json()
    assert data["outcome"] == "restored"
    assert data["state"]["guesses"] == ["STARE"]


@pytest.mark.parametrize("body", [
    {"date": "2025-01-01"},
    {"date": "2025-01-16"},
    {"date": "yesterday"},
    {"length": 9},
    {"mode": "weekly"},
])
def test_invalid_start_requests(client, body):
    response = start(client, **body)
    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_config"


def test_abandon_then_fall_back(client):
    start(client)
    guess(client, "stare")

    data = client.delete("/api/players/p1/game").get_json()
    assert data["abandoned_game"]["guessCount"] == 1

    data = start(client).get_json()
    assert data["fell_back_to_free"] is True
    assert data["state"]["mode"] == "free"


def test_stats(client, service):
    start(client)
    guess(client, service.get_session("p1").secret)

    stats = client.get("/api/players/p1/stats").get_json()["stats"]
    assert stats["totals"]["played"] == 1
    assert stats["totals"]["won"] == 1
    assert stats["lengths"]["5"]["guessDistribution"] == {"1": 1}


def test_health(client):
    data = client.get("/api/health").get_json()
    assert data["status"] == "healthy"
    assert data["word_counts"] == {"4": 3, "5": 4, "6": 2}


def test_service_unavailable(client, monkeypatch):
    monkeypatch.setattr(game_service_module, "_game_service", None)
    response = start(client)
    assert response.status_code == 500
    assert response.get_json()["error"] == "Game service unavailable"


@pytest.mark.parametrize("instant, earliest, latest", [
    (datetime(2025, 1, 15, 5, 0, tzinfo=timezone.utc), date(2025, 1, 14), date(2025, 1, 15)),
    (datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc), date(2025, 1, 15), date(2025, 1, 16)),
    (datetime(2025, 1, 15, 11, 0, tzinfo=timezone.utc), date(2025, 1, 14), date(2025, 1, 16)),
])
def test_current_local_dates(instant, earliest, latest):
    assert current_local_dates(instant) == (earliest, latest)


def test_player_date_follows_the_time_zones_in_use(client, clock):
    clock.instant = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

    response = start(client, date="2025-01-16")
    assert response.status_code == 200
    assert response.get_json()["state"]["date_iso"] == "2025-01-16"

    response = start(client, "p2", date=YESTERDAY)
    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_config"


def test_stale_choice_checks_the_player_date(client):
    start(client, date=YESTERDAY)
    guess(client, "stare")

    response = client.post("/api/players/p1/game/stale", json={"choice": "start_today", "date": "2025-01-16"})
    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_config"
