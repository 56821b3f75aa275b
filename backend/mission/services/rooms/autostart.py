import logging

from mission.models import RoomStatus

logger = logging.getLogger(__name__)


def should_start(room, required_players) -> bool:
    """A room starts itself once it is full and every agent is ready."""
    return len(room.players) == required_players and all(p.is_ready for p in room.players)


def start_if_ready(room, required_players, transport, now_ms, countdown_ms):
    """Move the room to PLAYING and announce a synchronized start time.

    Returns the absolute start time (epoch ms), or None when nothing happened.
    Re-running while the room is already PLAYING is a no-op, so repeated ready
    toggles never produce a second ``start_game``.
    """
    if not should_start(room, required_players):
        return None
    if room.status == RoomStatus.PLAYING:
        return None

    room.cancel_reset()
    room.status = RoomStatus.PLAYING
    room.round += 1
    start_time = now_ms + countdown_ms
    logger.info(
        f"[auto-start] room={room.id} round={room.round} players={len(room.players)} startTime={start_time}"
    )
    transport.broadcast(room.id, 'start_game', {'startTime': start_time})
    return start_time
