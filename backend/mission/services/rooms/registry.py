import threading
from contextlib import contextmanager
from typing import Dict, List

from mission.exceptions import RoomNotFound
from mission.models import Room


class RoomRegistry:
    """Owns every live Room of one coordinator, keyed by room id.

    The map has its own lock; each Room carries a lock for its mutations.
    ``locked`` hands out a room only while its lock is held and only if the
    room is still the registered one, so a deleted room is never mutated.
    """

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id):
        with self._lock:
            return room_id in self._rooms

    def get(self, room_id):
        with self._lock:
            return self._rooms.get(room_id)

    def get_or_create(self, room_id) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = Room(id=room_id)
                self._rooms[room_id] = room
            return room

    def room_ids(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def delete(self, room_id) -> None:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                return
            if room.players:
                raise ValueError(f'Room {room_id} still has {len(room.players)} players')
            del self._rooms[room_id]
        room.cancel_reset()

    @contextmanager
    def locked(self, room_id, create=False):
        while True:
            room = self.get_or_create(room_id) if create else self.get(room_id)
            if room is None:
                raise RoomNotFound(room_id)
            with room.lock:
                # Deleted (and possibly recreated) while we waited for the lock
                if self.get(room_id) is not room:
                    continue
                yield room
                return
