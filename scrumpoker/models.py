import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional

from scrumpoker.errors import PlayerNotFound
from scrumpoker.serializers import serialize_room_state

Subscriber = Callable[[Dict[str, Any]], None]


def _now() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_player_id() -> str:
    return uuid.uuid4().hex


class Player:
    def __init__(self, name: str):
        self.id = generate_player_id()
        self.name = name
        self.vote: Optional[float] = None
        self.voted_at: Optional[int] = None

    def __repr__(self):
        return f'<Player {self.id} {self.name!r} vote={self.vote!r}>'


class Room:
    """Players of one estimation session plus the room's voting state.

    Every mutator stamps ``updated_at`` and publishes the serialized room to
    subscribers once the change is applied. Mutators that need an existing
    player fail with ``PlayerNotFound`` before touching anything.
    """

    def __init__(self):
        # Keyed by connection id; insertion order is the display order
        self.players_by_id: Dict[str, Player] = {}
        self.are_votes_visible = False
        self.created_at = _now()
        self.updated_at = self.created_at
        self._subscribers: List[Subscriber] = []
        self._batch_depth = 0
        self._pending = False

    # ---- change notification ----

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @contextmanager
    def batch(self):
        """Publish once for all mutations made inside the block."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending:
                self._pending = False
                self._notify()

    def _changed(self) -> None:
        self.updated_at = _now()
        if self._batch_depth:
            self._pending = True
        else:
            self._notify()

    def _notify(self) -> None:
        if not self._subscribers:
            return
        view = serialize_room_state(self)
        for callback in list(self._subscribers):
            callback(view)

    def _get_player(self, user_id: str) -> Player:
        player = self.players_by_id.get(user_id)
        if player is None:
            raise PlayerNotFound(user_id)
        return player

    # ---- mutators ----

    def add_player(self, user_id: str, player_name: str) -> Player:
        player = Player(player_name)
        self.players_by_id[user_id] = player
        self._changed()
        return player

    def remove_player(self, user_id: str) -> None:
        self.players_by_id.pop(user_id, None)
        self._changed()

    def rename_player(self, user_id: str, player_name: str) -> None:
        player = self._get_player(user_id)
        player.name = player_name
        self._changed()

    def update_vote(self, user_id: str, vote: float) -> None:
        player = self._get_player(user_id)
        player.vote = vote
        player.voted_at = _now()
        self._changed()

    def show_votes(self) -> None:
        self.are_votes_visible = True
        self._changed()

    def everyone_voted(self) -> bool:
        return bool(self.players_by_id) and all(
            player.vote is not None for player in self.players_by_id.values()
        )

    def show_votes_if_everyone_voted(self) -> None:
        if self.everyone_voted():
            self.show_votes()

    def clear_votes(self) -> None:
        self.are_votes_visible = False
        for player in self.players_by_id.values():
            player.vote = None
            player.voted_at = None
        self._changed()
