from flask import current_app, request
from flask_socketio import join_room
from scrumpoker import socketio
from scrumpoker.broadcast import RoomChannel, socketio_room
from scrumpoker.errors import InvalidPayload, NotFound
from scrumpoker.models import Room
from scrumpoker.state import Registry
from threading import Lock
from typing import Any, Dict, Optional
import math

UNBOUND = 'unbound'
JOINED = 'joined'


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise InvalidPayload(f'{key} is required')
    return data.get(key)


def parse_player_name(data: Any, max_length: int) -> str:
    name = _field(data, 'playerName')
    if not isinstance(name, str) or not name.strip():
        raise InvalidPayload('playerName must be a non-empty string')
    return name.strip()[:max_length]


def parse_vote(data: Any) -> float:
    vote = _field(data, 'vote')
    # bool is an int subclass but never a valid estimate
    if isinstance(vote, bool) or not isinstance(vote, (int, float)):
        raise InvalidPayload('vote must be a finite number')
    try:
        finite = math.isfinite(vote)
    except OverflowError:
        finite = False
    if not finite:
        raise InvalidPayload('vote must be a finite number')
    return vote


class SessionHandler:
    """Binds Socket.IO sessions to rooms and turns events into room mutations.

    Each session is ``unbound`` after connecting, ``joined`` after a join
    command, and forgotten on disconnect. Commands run one at a time under
    ``lock`` so a mutation and its publish never interleave with another.
    """

    def __init__(self, registry: Registry, channel: RoomChannel):
        self.registry = registry
        self.channel = channel
        self.sessions: Dict[str, Dict[str, Any]] = {}
        self.lock = Lock()

    def _ctx(self) -> Dict[str, Any]:
        return self.sessions[_get_sid()]

    def _bound_room(self) -> Room:
        return self.registry.get_room(self._ctx()['room_name'])

    def _max_name_length(self) -> int:
        return int(current_app.config.get('MAX_PLAYER_NAME_LENGTH', 64))

    def _get_or_create_room(self, room_name: str) -> Room:
        if not self.registry.has_room(room_name):
            self.registry.create_room(room_name)
            current_app.logger.info(f"[room-create] room={room_name} total={len(self.registry.rooms)}")
        room = self.registry.get_room(room_name)
        self.channel.attach(room_name, room)
        return room

    def handle_connect(self, auth=None):
        room_name = (request.args.get('roomName') or '').strip()
        if not room_name:
            current_app.logger.warning(f"[connect-reject] sid={_get_sid()} missing roomName")
            return False
        with self.lock:
            self.sessions[_get_sid()] = {'room_name': room_name, 'state': UNBOUND}
        current_app.logger.info(f"[connect] sid={_get_sid()} room={room_name}")

    def handle_join(self, data):
        player_name = parse_player_name(data, self._max_name_length())
        with self.lock:
            ctx = self._ctx()
            room_name = ctx['room_name']
            # Enter the broadcast group first so the joiner sees its own join
            join_room(socketio_room(room_name))
            room = self._get_or_create_room(room_name)
            room.add_player(_get_sid(), player_name)
            ctx['state'] = JOINED
            count = len(room.players_by_id)
        current_app.logger.info(f"[join] room={room_name} sid={_get_sid()} players={count}")

    def handle_vote(self, data):
        vote = parse_vote(data)
        with self.lock:
            if self._ctx()['state'] != JOINED:
                current_app.logger.warning(f"[drop] sid={_get_sid()} vote before join")
                return
            room = self._bound_room()
            with room.batch():
                room.update_vote(_get_sid(), vote)
                room.show_votes_if_everyone_voted()

    def handle_show_votes(self, data=None):
        with self.lock:
            self._bound_room().show_votes()

    def handle_clear_votes(self, data=None):
        with self.lock:
            self._bound_room().clear_votes()

    def handle_rename_self(self, data):
        player_name = parse_player_name(data, self._max_name_length())
        with self.lock:
            self._bound_room().rename_player(_get_sid(), player_name)

    def handle_disconnect(self, reason=None):
        with self.lock:
            ctx = self.sessions.pop(_get_sid(), None)
            if not ctx or ctx['state'] != JOINED:
                return
            room_name = ctx['room_name']
            if self.registry.has_room(room_name):
                self.registry.get_room(room_name).remove_player(_get_sid())
        current_app.logger.info(f"[leave] room={room_name} sid={_get_sid()}")

    def handle_error(self, exc: Exception):
        """Log and drop a failed command; other sessions are unaffected."""
        event: Optional[dict] = getattr(request, 'event', None)
        name = event.get('message') if event else None
        sid = getattr(request, 'sid', None)
        if isinstance(exc, (NotFound, InvalidPayload)):
            current_app.logger.warning(f"[drop] sid={sid} event={name} {type(exc).__name__}: {exc}")
        else:
            current_app.logger.error(f"[error] sid={sid} event={name}", exc_info=exc)


def register_socketio_handlers(handler: SessionHandler, namespace: str = '/', testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Handlers are bound on the configured namespace. When testing is True and
    that namespace is not the default one, they are mirrored on '/' too.
    """
    events = {
        'connect': handler.handle_connect,
        'disconnect': handler.handle_disconnect,
        'join': handler.handle_join,
        'vote': handler.handle_vote,
        'showVotes': handler.handle_show_votes,
        'clearVotes': handler.handle_clear_votes,
        'renameSelf': handler.handle_rename_self,
    }
    namespaces = [namespace]
    if testing and namespace != '/':
        # Test-only mirror on default namespace
        namespaces.append('/')
    for ns in namespaces:
        for name, func in events.items():
            socketio.on_event(name, func, namespace=ns)
    socketio.on_error_default(handler.handle_error)
