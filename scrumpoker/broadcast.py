"""Push room state to every connection subscribed to that room."""
from typing import Any, Callable, Dict

from scrumpoker.models import Room

Publisher = Callable[[str, Dict[str, Any]], None]


def socketio_room(room_name: str) -> str:
    return f"room:{room_name}"


class RoomChannel:
    """Subscribes once per room and forwards each new view to ``publish``."""

    def __init__(self, publish: Publisher):
        self._publish = publish
        self._unsubscribers: Dict[str, Callable[[], None]] = {}

    def is_attached(self, room_name: str) -> bool:
        return room_name in self._unsubscribers

    def attach(self, room_name: str, room: Room) -> bool:
        if room_name in self._unsubscribers:
            return False

        def forward(view: Dict[str, Any]) -> None:
            self._publish(room_name, view)

        self._unsubscribers[room_name] = room.subscribe(forward)
        return True

    def detach(self, room_name: str) -> None:
        unsubscribe = self._unsubscribers.pop(room_name, None)
        if unsubscribe is not None:
            unsubscribe()


def socketio_publisher(socketio, namespace: str = '/') -> Publisher:
    def publish(room_name: str, view: Dict[str, Any]) -> None:
        socketio.emit('state', view, to=socketio_room(room_name), namespace=namespace)

    return publish
