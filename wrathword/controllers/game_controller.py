"""
Game Controller

Handles all puzzle-related HTTP endpoints. Every endpoint answers
{"success": bool, ...}; the secret word only appears once a game is over.
"""

from dataclasses import asdict
from datetime import date

from flask import Blueprint, request, jsonify

from ..models.errors import (
    GameError, GameOver, HintUnavailable, InvalidConfig, InvalidLength, NoActiveGame, NotAccepted,
)
from ..utils.decorators import require_game_service
from ..utils.helpers import current_local_dates
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)

UNSAVED_WARNING = 'Progress could not be saved and may be lost if the server restarts'

def _status_code(error: GameError) -> int:
    if isinstance(error, (InvalidLength, NotAccepted, InvalidConfig)):
        return 400
    if isinstance(error, NoActiveGame):
        return 404
    if isinstance(error, (GameOver, HintUnavailable)):
        return 409
    return 500

def _session_payload(session, persisted: bool = True) -> dict:
    payload = {
        'success': True,
        'state': asdict(session.to_state()),
        'persisted': persisted,
    }
    if not persisted:
        payload['warning'] = UNSAVED_WARNING
    if session.is_over:
        payload['share_text'] = session.share_text()
        payload['result_title'] = session.result_title()
    return payload

def _game_error_response(action: str, player_id: str, error: GameError):
    error_response = {'success': False, **error.to_dict()}
    game_logger.log_server_response(request, action, False, error_response, player_id,
                                    error_code=error.code)
    return jsonify(error_response), _status_code(error)

def _unexpected_error_response(action: str, player_id, error: Exception):
    game_logger.log_error(request, error, action, player_id)
    error_response = {'success': False, 'error': str(error)}
    game_logger.log_server_response(request, action, False, error_response, player_id)
    return jsonify(error_response), 500

def _player_date(requested, server_today: str, now) -> str:
    """Accept the player's local date when it is today somewhere on Earth."""
    if not requested:
        return server_today
    try:
        player_day = date.fromisoformat(requested)
    except (TypeError, ValueError):
        raise InvalidConfig(f"date must be YYYY-MM-DD, got: {requested!r}")
    earliest, latest = current_local_dates(now)
    if not earliest <= player_day <= latest:
        raise InvalidConfig(f"date {requested} is not the current date in any time zone")
    return requested

@game_bp.route('/players/<player_id>/game', methods=['POST'])
@require_game_service
def start_game(game_service, player_id):
    """Start, restore, or surface a stale daily puzzle."""
    try:
        data = request.get_json(silent=True) or {}
        game_logger.log_user_action(request, 'start_game', player_id, extra_data=data)

        result = game_service.start_game(
            player_id,
            length=data.get('length'),
            max_attempts=data.get('max_attempts'),
            mode=data.get('mode', 'daily'),
            date_iso=_player_date(data.get('date'), game_service.clock(), game_service.now()),
        )

        if result.outcome == 'stale_game':
            response_data = {
                'success': True,
                'outcome': 'stale_game',
                'stale': asdict(result.session.to_state()),
                'today': result.today,
                'choices': ['finish', 'start_today'],
            }
        else:
            response_data = _session_payload(result.session, result.persisted)
            response_data['outcome'] = result.outcome
            response_data['fell_back_to_free'] = result.fell_back_to_free

        if result.fell_back_to_free:
            game_logger.log_game_event(player_id, 'daily_fallback', date=result.today)

        game_logger.log_server_response(request, 'start_game', True, response_data, player_id,
                                        outcome=result.outcome)
        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('start_game', player_id, e)
    except Exception as e:
        return _unexpected_error_response('start_game', player_id, e)

@game_bp.route('/players/<player_id>/game', methods=['GET'])
@require_game_service
def get_state(game_service, player_id):
    """Get the current game state."""
    try:
        game_logger.log_user_action(request, 'get_state', player_id)

        session = game_service.get_session(player_id)
        response_data = _session_payload(session, not game_service.has_unsaved_progress(player_id))

        game_logger.log_server_response(request, 'get_state', True, response_data, player_id)
        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('get_state', player_id, e)
    except Exception as e:
        return _unexpected_error_response('get_state', player_id, e)

@game_bp.route('/players/<player_id>/game/guess', methods=['POST'])
@require_game_service
def submit_guess(game_service, player_id):
    """Submit a guess for validation and evaluation."""
    try:
        data = request.get_json(silent=True)
        if not data or 'guess' not in data:
            error_response = {
                'success': False,
                'error': 'Guess is required'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, player_id)
            return jsonify(error_response), 400

        guess = data['guess']
        game_logger.log_user_action(request, 'submit_guess', player_id, guess=guess)

        result = game_service.submit_guess(player_id, guess)
        session = result.session

        response_data = _session_payload(session, result.persisted)
        response_data['feedback'] = [state.value for state in result.feedback]

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, player_id,
            round=session.current_row, status=session.status.value
        )

        if session.is_over:
            game_logger.log_game_event(
                player_id, f'game_{session.status.value}',
                puzzle=session.config.seed_string(), mode=session.config.mode.value,
                rounds_used=session.current_row, target_word=session.secret,
            )

        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('submit_guess', player_id, e)
    except Exception as e:
        return _unexpected_error_response('submit_guess', player_id, e)

@game_bp.route('/players/<player_id>/game/hint', methods=['POST'])
@require_game_service
def use_hint(game_service, player_id):
    """Reveal one letter of the secret."""
    try:
        game_logger.log_user_action(request, 'use_hint', player_id)

        result = game_service.use_hint(player_id)

        response_data = _session_payload(result.session, result.persisted)
        response_data['hint'] = {'row': result.row, 'col': result.col, 'letter': result.letter}

        game_logger.log_server_response(request, 'use_hint', True, response_data, player_id,
                                        col=result.col)
        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('use_hint', player_id, e)
    except Exception as e:
        return _unexpected_error_response('use_hint', player_id, e)

@game_bp.route('/players/<player_id>/game/stale', methods=['POST'])
@require_game_service
def resolve_stale(game_service, player_id):
    """Finish a stale daily or start today's puzzle instead."""
    try:
        data = request.get_json(silent=True) or {}
        choice = data.get('choice')
        game_logger.log_user_action(request, 'resolve_stale', player_id, choice=choice)

        today = _player_date(data.get('date'), game_service.clock(), game_service.now())
        result = game_service.resolve_stale(player_id, choice, date_iso=today)

        response_data = _session_payload(result.session, result.persisted)
        response_data['outcome'] = result.outcome
        response_data['fell_back_to_free'] = result.fell_back_to_free

        game_logger.log_server_response(request, 'resolve_stale', True, response_data, player_id,
                                        choice=choice)
        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('resolve_stale', player_id, e)
    except Exception as e:
        return _unexpected_error_response('resolve_stale', player_id, e)

@game_bp.route('/players/<player_id>/game', methods=['DELETE'])
@require_game_service
def abandon_game(game_service, player_id):
    """Abandon the active game. An abandoned daily cannot be replayed."""
    try:
        game_logger.log_user_action(request, 'abandon_game', player_id)

        abandoned = game_service.abandon_game(player_id)
        response_data = {
            'success': True,
            'abandoned_game': abandoned
        }

        game_logger.log_server_response(request, 'abandon_game', True, response_data, player_id)
        if abandoned:
            game_logger.log_game_event(player_id, 'game_abandoned', **abandoned)

        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('abandon_game', player_id, e)
    except Exception as e:
        return _unexpected_error_response('abandon_game', player_id, e)

@game_bp.route('/players/<player_id>/stats', methods=['GET'])
@require_game_service
def get_stats(game_service, player_id):
    """Per-length and total statistics for a player."""
    try:
        game_logger.log_user_action(request, 'get_stats', player_id)

        response_data = {
            'success': True,
            'stats': game_service.get_stats(player_id)
        }

        game_logger.log_server_response(request, 'get_stats', True, response_data, player_id)
        return jsonify(response_data)

    except GameError as e:
        return _game_error_response('get_stats', player_id, e)
    except Exception as e:
        return _unexpected_error_response('get_stats', player_id, e)

@game_bp.route('/health', methods=['GET'])
@require_game_service
def health_check(game_service):
    """Health check endpoint."""
    try:
        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'active_sessions': len(game_service.sessions),
            'unsaved_players': len(game_service.unsaved_players),
            'word_counts': {str(length): game_service.catalog.answer_count(length)
                            for length in game_service.catalog.lengths},
            'log_stats': game_logger.get_log_stats(),
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
