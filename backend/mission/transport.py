"""Flask-SocketIO side of the room services.

Room ids are client supplied, so they are namespaced (``room:<id>``) to keep
them apart from the per-connection rooms Socket.IO creates for every sid.
"""


def channel(room_id):
    return f"room:{room_id}"


class SocketIOTransport:

    def __init__(self, socketio, namespace='/'):
        self.socketio = socketio
        self.namespace = namespace

    def broadcast(self, room_id, event, payload):
        self.socketio.emit(event, payload, to=channel(room_id), namespace=self.namespace)

    def send(self, sid, event, payload):
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    # ``server`` directly rather than flask_socketio.join_room: the reset timer
    # calls in from a background task without a request context
    def enter(self, sid, room_id):
        self.socketio.server.enter_room(sid, channel(room_id), namespace=self.namespace)

    def leave(self, sid, room_id):
        self.socketio.server.leave_room(sid, channel(room_id), namespace=self.namespace)
