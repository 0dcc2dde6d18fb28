class NotFound(LookupError):
    """A room or player lookup failed."""


class RoomNotFound(NotFound):
    def __init__(self, room_name: str):
        super().__init__(f"Room {room_name} doesn't exist")
        self.room_name = room_name


class PlayerNotFound(NotFound):
    def __init__(self, player_id: str):
        super().__init__(f"Player with id {player_id} doesn't exist in a room")
        self.player_id = player_id


class InvalidPayload(ValueError):
    """A client command arrived with a missing or malformed field."""
