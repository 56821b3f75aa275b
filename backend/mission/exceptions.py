"""Mission coordinator errors.

Room operations raise these; the socket layer catches ``MissionError`` at the
boundary and decides whether the requester hears about it (``notify``) or the
event is only logged.
"""


class MissionError(Exception):
    """Base class for every rejected room operation."""
    notify = False


class ConfigurationError(MissionError):
    """Invalid coordinator settings detected at startup."""


# ---- capacity / availability: reported to the requester ----

class RoomUnavailable(MissionError):
    notify = True

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__('Mission already in progress. Access Denied.')


class TeamFull(MissionError):
    notify = True

    def __init__(self, room_id, capacity):
        self.room_id = room_id
        self.capacity = capacity
        super().__init__(f'Team is full (Max {capacity} Agents).')


class AlreadyInRoom(MissionError):
    notify = True

    def __init__(self, room_id, player_id):
        self.room_id = room_id
        self.player_id = player_id
        super().__init__('Agent already in this room.')


# ---- authorization: dropped silently ----

class NotCaptain(MissionError):
    def __init__(self, room_id, player_id):
        self.room_id = room_id
        self.player_id = player_id
        super().__init__(f'{player_id} is not the captain of room {room_id}')


class SelfKick(MissionError):
    def __init__(self, room_id, player_id):
        self.room_id = room_id
        self.player_id = player_id
        super().__init__(f'Captain {player_id} cannot kick themselves from room {room_id}')


# ---- referential misses: dropped silently ----

class RoomNotFound(MissionError):
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f'Room {room_id} not found')


class PlayerNotFound(MissionError):
    def __init__(self, room_id, player_id):
        self.room_id = room_id
        self.player_id = player_id
        super().__init__(f'Player {player_id} not found in room {room_id}')


class MalformedEvent(MissionError):
    """Payload missing fields or carrying values of the wrong shape."""
