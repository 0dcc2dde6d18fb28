from typing import Any, Dict


def serialize_player(player, votes_visible: bool) -> Dict[str, Any]:
    data = {'id': player.id, 'name': player.name}
    if votes_visible and player.vote is not None:
        data['vote'] = player.vote
    # votedAt is public: it shows who has voted without the value
    if player.voted_at is not None:
        data['votedAt'] = player.voted_at
    return data


def serialize_room_state(room) -> Dict[str, Any]:
    """Build the client-facing view of a room.

    Votes are only included once the room has revealed them. Players keep
    the order in which they joined.
    """
    return {
        'players': [
            serialize_player(player, room.are_votes_visible)
            for player in room.players_by_id.values()
        ],
        'areVotesVisible': room.are_votes_visible,
        'updatedAt': room.updated_at,
    }
