"""Process-wide registry of rooms, kept in memory only."""
from typing import Dict

from scrumpoker.errors import RoomNotFound
from scrumpoker.models import Room


class Registry:
    def __init__(self):
        self.rooms: Dict[str, Room] = {}

    def has_room(self, room_name: str) -> bool:
        return room_name in self.rooms

    def get_room(self, room_name: str) -> Room:
        room = self.rooms.get(room_name)
        if room is None:
            raise RoomNotFound(room_name)
        return room

    def create_room(self, room_name: str) -> Room:
        # Replaces any existing room; callers check has_room first
        room = Room()
        self.rooms[room_name] = room
        return room
