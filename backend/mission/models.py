import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RoomStatus(str, Enum):
    LOBBY = 'LOBBY'
    PLAYING = 'PLAYING'
    GAME_OVER = 'GAME_OVER'


class PlayerStatus(str, Enum):
    ALIVE = 'ALIVE'
    DEAD = 'DEAD'
    FINISHED = 'FINISHED'


DONE_STATUSES = (PlayerStatus.DEAD, PlayerStatus.FINISHED)


def default_player_name(player_id):
    """Placeholder shown for agents that joined without a name."""
    return f'Agent {player_id[:4]}'


@dataclass
class Player:
    id: str
    name: str
    is_ready: bool = False
    score: int = 0
    status: PlayerStatus = PlayerStatus.ALIVE

    def reset(self):
        self.is_ready = False
        self.score = 0
        self.status = PlayerStatus.ALIVE

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'isReady': self.is_ready,
            'score': self.score,
            'status': self.status.value,
        }


@dataclass(eq=False)
class Room:
    id: str
    players: List[Player] = field(default_factory=list)
    status: RoomStatus = RoomStatus.LOBBY
    # Bumped on every auto-start; reset timers only act on the round they were set for
    round: int = 0
    # Pending leaderboard reset, if any
    reset_timer: Optional[object] = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def captain(self) -> Optional[Player]:
        return self.players[0] if self.players else None

    def find_player(self, player_id) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def remove_player(self, player_id) -> Optional[Player]:
        player = self.find_player(player_id)
        if player is not None:
            self.players.remove(player)
        return player

    def cancel_reset(self):
        if self.reset_timer is not None:
            self.reset_timer.cancel()
            self.reset_timer = None

    def players_payload(self):
        return [p.to_dict() for p in self.players]

    def to_dict(self):
        return {
            'id': self.id,
            'status': self.status.value,
            'players': self.players_payload(),
        }
