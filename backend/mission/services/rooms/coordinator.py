"""Room state machine: LOBBY -> PLAYING -> GAME_OVER -> LOBBY.

Every operation runs under the room's lock and emits its outbound events
before releasing it, so members see mutations in the order they happened.
Rejections are raised as ``MissionError`` subclasses; the caller decides
whether the requester is told.
"""

import logging
import time

from mission.exceptions import (
    AlreadyInRoom,
    NotCaptain,
    PlayerNotFound,
    RoomNotFound,
    RoomUnavailable,
    SelfKick,
    TeamFull,
)
from mission.models import Player, PlayerStatus, RoomStatus, default_player_name
from .autostart import start_if_ready
from .scheduler import end_session, is_session_over

logger = logging.getLogger(__name__)


def wall_clock_ms():
    return int(time.time() * 1000)


class RoomCoordinator:

    def __init__(self, registry, transport, scheduler, required_players,
                 leaderboard_duration_ms, start_countdown_ms=3000, clock=wall_clock_ms):
        self.registry = registry
        self.transport = transport
        self.scheduler = scheduler
        self.required_players = required_players
        self.leaderboard_duration_ms = leaderboard_duration_ms
        self.start_countdown_ms = start_countdown_ms
        self.clock = clock

    # ---- inbound operations ----

    def join(self, room_id, player_id, name=None) -> Player:
        with self.registry.locked(room_id, create=True) as room:
            try:
                if room.status == RoomStatus.PLAYING:
                    raise RoomUnavailable(room_id)
                if len(room.players) >= self.required_players:
                    raise TeamFull(room_id, self.required_players)
                if room.find_player(player_id) is not None:
                    raise AlreadyInRoom(room_id, player_id)
            except (RoomUnavailable, TeamFull, AlreadyInRoom):
                if not room.players:
                    self.registry.delete(room_id)
                raise

            player = Player(id=player_id, name=name or default_player_name(player_id))
            room.players.append(player)
            self.transport.enter(player_id, room_id)
            logger.info(f"[join] room={room_id} player={player_id} name={player.name!r} size={len(room.players)}")

            self._broadcast_roster(room)
            self._check_start(room)
            return player

    def toggle_ready(self, room_id, player_id) -> Player:
        with self.registry.locked(room_id) as room:
            player = self._require_player(room, player_id)
            player.is_ready = not player.is_ready
            logger.debug(f"[ready] room={room_id} player={player_id} ready={player.is_ready}")

            self._broadcast_roster(room)
            self._check_start(room)
            return player

    def kick(self, room_id, player_id, target_id) -> Player:
        with self.registry.locked(room_id) as room:
            captain = room.captain
            if captain is None or captain.id != player_id:
                raise NotCaptain(room_id, player_id)
            if target_id == player_id:
                raise SelfKick(room_id, player_id)
            target = room.remove_player(target_id)
            if target is None:
                raise PlayerNotFound(room_id, target_id)

            logger.info(f"[kick] room={room_id} captain={player_id} target={target_id}")
            self._expel(room, target, reason='kicked')
            self._broadcast_roster(room)
            return target

    def update_player(self, room_id, player_id, score, status) -> Player:
        """Overwrite a player's reported score/status; ends the session when nobody is left alive."""
        with self.registry.locked(room_id) as room:
            player = self._require_player(room, player_id)
            player.score = score
            player.status = PlayerStatus(status)
            self.transport.broadcast(room_id, 'player_updated', player.to_dict())

            if is_session_over(room):
                logger.info(f"[game-over] room={room_id} round={room.round} all players finished")
                end_session(
                    room,
                    self.transport,
                    self.scheduler,
                    self.clock(),
                    self.leaderboard_duration_ms,
                    self.reset_room,
                )
            return player

    def disconnect(self, player_id):
        """Drop a connection from every room it is in; returns the affected room ids."""
        affected = []
        for room_id in self.registry.room_ids():
            try:
                with self.registry.locked(room_id) as room:
                    if room.remove_player(player_id) is None:
                        continue
                    affected.append(room_id)
                    if not room.players:
                        self.registry.delete(room_id)
                        logger.info(f"[disconnect] room={room_id} player={player_id} room deleted")
                    else:
                        logger.info(f"[disconnect] room={room_id} player={player_id} size={len(room.players)}")
                        self._broadcast_roster(room)
            except RoomNotFound:
                continue
        return affected

    # ---- timer callback ----

    def reset_room(self, room_id, expected_round) -> bool:
        """Leaderboard window elapsed: keep only the captain and reopen the lobby."""
        try:
            with self.registry.locked(room_id) as room:
                if room.status != RoomStatus.GAME_OVER or room.round != expected_round:
                    logger.info(
                        f"[reset-abort] room={room_id} expected_round={expected_round} "
                        f"actual_round={room.round} status={room.status.value}"
                    )
                    return False
                room.reset_timer = None

                if not room.players:
                    self.registry.delete(room_id)
                    logger.info(f"[reset-fire] room={room_id} empty, deleted")
                    return True

                captain = room.players[0]
                for player in room.players[1:]:
                    self._expel(room, player, reason='reset')
                captain.reset()
                room.players = [captain]
                room.status = RoomStatus.LOBBY
                logger.info(f"[reset-fire] room={room_id} round={expected_round} captain={captain.id}")
                self._broadcast_roster(room)
                return True
        except RoomNotFound:
            logger.info(f"[reset-abort] room={room_id} no longer exists")
            return False

    # ---- helpers ----

    def _require_player(self, room, player_id):
        player = room.find_player(player_id)
        if player is None:
            raise PlayerNotFound(room.id, player_id)
        return player

    def _expel(self, room, player, reason):
        self.transport.send(player.id, 'kicked', {'roomId': room.id, 'reason': reason})
        self.transport.leave(player.id, room.id)

    def _broadcast_roster(self, room):
        self.transport.broadcast(room.id, 'room_update', room.players_payload())

    def _check_start(self, room):
        return start_if_ready(
            room,
            self.required_players,
            self.transport,
            self.clock(),
            self.start_countdown_ms,
        )
