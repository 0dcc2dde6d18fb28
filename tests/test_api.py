import threading


def test_index_serves_client(client):
    res = client.get('/')
    assert res.status_code == 200
    assert b'id="root"' in res.data


def test_hashed_static_assets_are_cached_for_a_year(client):
    res = client.get('/static/js/main.abc123.js')
    assert res.status_code == 200
    assert res.cache_control.max_age == 31536000


def test_other_public_files_use_default_caching(client):
    res = client.get('/manifest.json')
    assert res.status_code == 200
    assert res.cache_control.max_age != 31536000


def test_missing_public_file(client):
    assert client.get('/nope.txt').status_code == 404


def test_room_state_unknown_room(client, registry):
    res = client.get('/api/rooms/test-room/state')
    assert res.status_code == 404
    assert 'error' in res.get_json()
    # Reading never creates a room
    assert registry.has_room('test-room') is False


def test_room_state_hides_votes(client, registry, frozen_now):
    room = registry.create_room('test-room')
    room.add_player('foo', 'Foo')
    room.add_player('bar', 'Bar')
    room.update_vote('foo', 8)

    res = client.get('/api/rooms/test-room/state')
    assert res.status_code == 200
    data = res.get_json()
    assert data['areVotesVisible'] is False
    assert data['updatedAt'] == frozen_now
    assert [p['name'] for p in data['players']] == ['Foo', 'Bar']
    assert 'vote' not in data['players'][0]
    assert data['players'][0]['votedAt'] == frozen_now


def test_room_state_after_reveal(client, registry, connect):
    foo = connect()
    foo.emit('join', {'playerName': 'Foo'})
    foo.emit('vote', {'vote': 13})

    data = client.get('/api/rooms/test-room/state').get_json()
    assert data['areVotesVisible'] is True
    assert data['players'][0]['vote'] == 13


def test_room_state_waits_for_running_command(client, registry, session_handler):
    registry.create_room('test-room')
    result = {}

    def fetch():
        result['status'] = client.get('/api/rooms/test-room/state').status_code

    worker = threading.Thread(target=fetch)
    with session_handler.lock:
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
    worker.join(timeout=5)
    assert result['status'] == 200
