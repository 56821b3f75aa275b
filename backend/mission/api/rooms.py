from flask import Blueprint, current_app, jsonify
from mission.exceptions import RoomNotFound

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_id>', methods=['GET'])
def get_room(room_id):
    """
    Read-only snapshot of a live room: status and roster in join order.
    """
    registry = current_app.extensions['mission'].registry
    try:
        with registry.locked(room_id) as room:
            data = room.to_dict()
    except RoomNotFound:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(data), 200
