"""End-of-session detection and the delayed leaderboard reset."""

import logging

from mission.models import DONE_STATUSES, RoomStatus

logger = logging.getLogger(__name__)


class TimerHandle:
    """One-shot timer; ``cancel`` before it fires and the callback never runs."""

    def __init__(self, delay):
        self.delay = delay
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class BackgroundScheduler:
    """Runs delayed callbacks on Socket.IO background tasks.

    Uses ``socketio.sleep`` so the wait cooperates with whichever async mode
    (threading, eventlet, gevent) the server was started with.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay, callback, *args) -> TimerHandle:
        handle = TimerHandle(delay)

        def _runner():
            self.socketio.sleep(delay)
            if handle.cancelled:
                return
            try:
                callback(*args)
            except Exception:
                logger.exception(f"[timer-error] callback={getattr(callback, '__name__', callback)} args={args}")

        self.socketio.start_background_task(_runner)
        return handle


def is_session_over(room) -> bool:
    """True when a PLAYING room has no agent left ALIVE."""
    if room.status != RoomStatus.PLAYING:
        return False
    return all(p.status in DONE_STATUSES for p in room.players)


def end_session(room, transport, scheduler, now_ms, leaderboard_duration_ms, on_reset):
    """PLAYING -> GAME_OVER: publish the final standings and arm the reset.

    ``on_reset(room_id, round)`` is what the timer calls once the leaderboard
    window has passed. Returns the absolute reset time (epoch ms).
    """
    room.status = RoomStatus.GAME_OVER
    reset_time = now_ms + leaderboard_duration_ms
    transport.broadcast(room.id, 'force_game_over', {
        'players': room.players_payload(),
        'resetTime': reset_time,
    })

    room.cancel_reset()
    room.reset_timer = scheduler.call_later(leaderboard_duration_ms / 1000.0, on_reset, room.id, room.round)
    logger.info(
        f"[reset-set] room={room.id} round={room.round} duration={leaderboard_duration_ms}ms resetTime={reset_time}"
    )
    return reset_time
