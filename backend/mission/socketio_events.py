from functools import wraps

from flask import current_app, request
from flask_socketio import emit

from mission import socketio
from mission.exceptions import MalformedEvent, MissionError
from mission.models import PlayerStatus


def _coordinator():
    return current_app.extensions['mission']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _guarded(handler):
    """Turn rejected room operations into replies or log lines, never crashes."""

    @wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except MissionError as exc:
            if exc.notify:
                emit('error_msg', str(exc))
                current_app.logger.info(f"[rejected] sid={_get_sid()} event={handler.__name__} reason={exc}")
            else:
                current_app.logger.debug(f"[ignored] sid={_get_sid()} event={handler.__name__} reason={exc}")
            return None

    return wrapper


# ---- payload parsing ----

def _room_id(data):
    room_id = data.get('roomId') if isinstance(data, dict) else data
    if isinstance(room_id, (int, float)) and not isinstance(room_id, bool):
        room_id = str(room_id)
    if not isinstance(room_id, str) or not room_id.strip():
        raise MalformedEvent(f'roomId is required, got {room_id!r}')
    return room_id


def _payload(data):
    if not isinstance(data, dict):
        raise MalformedEvent(f'expected an object payload, got {type(data).__name__}')
    return data


def _name(data):
    name = data.get('name')
    if not isinstance(name, str):
        return None
    return name.strip() or None


def _score(data):
    score = data.get('score')
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise MalformedEvent(f'score must be a number, got {score!r}')
    if isinstance(score, float) and not score.is_integer():
        raise MalformedEvent(f'score must be an integer, got {score!r}')
    return int(score)


def _status(data):
    try:
        return PlayerStatus(data.get('status'))
    except ValueError:
        raise MalformedEvent(f"status must be one of ALIVE/DEAD/FINISHED, got {data.get('status')!r}")


# ---- handlers ----

def handle_connect(auth=None):
    current_app.logger.info(f"User connected: {_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"User disconnected: {sid}")
    _coordinator().disconnect(sid)


@_guarded
def handle_join_room(data=None):
    data = _payload(data)
    _coordinator().join(_room_id(data), _get_sid(), _name(data))


@_guarded
def handle_toggle_ready(data=None):
    _coordinator().toggle_ready(_room_id(data), _get_sid())


@_guarded
def handle_kick_player(data=None):
    data = _payload(data)
    target_id = data.get('targetId')
    if not isinstance(target_id, str) or not target_id:
        raise MalformedEvent(f'targetId is required, got {target_id!r}')
    _coordinator().kick(_room_id(data), _get_sid(), target_id)


@_guarded
def handle_update_player(data=None):
    data = _payload(data)
    _coordinator().update_player(_room_id(data), _get_sid(), _score(data), _status(data))


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the mission events on the given Socket.IO namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('toggle_ready', handle_toggle_ready, namespace=namespace)
    socketio.on_event('kick_player', handle_kick_player, namespace=namespace)
    socketio.on_event('update_player', handle_update_player, namespace=namespace)
