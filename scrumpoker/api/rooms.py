from flask import Blueprint, current_app, jsonify
from scrumpoker import REGISTRY_KEY, SESSIONS_KEY
from scrumpoker.errors import RoomNotFound
from scrumpoker.serializers import serialize_room_state

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_name>/state', methods=['GET'])
def get_room_state(room_name):
    """
    Returns the same view of a room that connected players receive.
    """
    registry = current_app.extensions[REGISTRY_KEY]
    # Read under the command lock so a half-applied command is never served
    with current_app.extensions[SESSIONS_KEY].lock:
        try:
            room = registry.get_room(room_name)
        except RoomNotFound as exc:
            return jsonify({'error': str(exc)}), 404
        view = serialize_room_state(room)
    return jsonify(view), 200
