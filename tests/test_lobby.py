import struct

import pytest

from rangerclient.games import encode_games_list
from rangerclient.lobby import (
    ChatMessage,
    LobbyEvent,
    LobbyInfo,
    LobbyState,
    LobbyUser,
    UserAction,
    parse_chat_message,
    parse_lobby_user_list,
    parse_public_lobby_list,
    parse_user_action,
    parse_user_id,
    parse_user_id_and_text,
)
from rangerclient.wire import PayloadError


def _u32(value):
    return struct.pack(">I", value)


def _user_details(icon_id, status, nick, games=()):
    return _u32(icon_id) + bytes([status]) + nick.encode("latin-1") + b"\0" + encode_games_list(games)


def _user_record(user_id, icon_id, status, nick, games=()):
    return _u32(user_id) + _user_details(icon_id, status, nick, games)


def _lobby_record(lobby_id, users, lobby_type, name):
    return _u32(lobby_id) + _u32(users) + bytes([lobby_type]) + name.encode("latin-1") + b"\0"


def _state_with_lobbies():
    state = LobbyState()
    state.replace_lobbies(
        [LobbyInfo(10, "Main", 0, 5), LobbyInfo(20, "Second", 0, 3), LobbyInfo(30, "Third", 1, 2)]
    )
    return state


def test_parse_public_lobby_list():
    payload = _u32(2) + _lobby_record(10, 5, 0, "Main") + _lobby_record(20, 3, 1, "Other")
    lobbies = parse_public_lobby_list(payload)
    assert lobbies == [LobbyInfo(10, "Main", 0, 5), LobbyInfo(20, "Other", 1, 3)]


def test_parse_public_lobby_list_truncated():
    payload = _u32(2) + _lobby_record(10, 5, 0, "Main")
    with pytest.raises(PayloadError):
        parse_public_lobby_list(payload)


def test_parse_lobby_user_list():
    payload = (
        _u32(0)
        + _u32(10)
        + _u32(2)
        + _u32(0)
        + _user_record(7, 100, 1, "alice", [1, 9])
        + _user_record(8, 0, 0, "bob")
    )
    lobby_id, users = parse_lobby_user_list(payload)
    assert lobby_id == 10
    assert users == [
        LobbyUser(7, 100, 1, "alice", (1, 9)),
        LobbyUser(8, 0, 0, "bob", ()),
    ]


def test_parse_lobby_user_list_truncated():
    payload = _u32(0) + _u32(10) + _u32(1) + _u32(0) + _u32(7)
    with pytest.raises(PayloadError):
        parse_lobby_user_list(payload)


def test_parse_user_action_and_joined_user():
    details = _user_details(55, 2, "carol", [3])
    action = parse_user_action(_u32(20) + _u32(10) + _u32(9) + details)
    assert (action.previous_lobby, action.new_lobby, action.user_id) == (20, 10, 9)
    assert action.details == details
    assert action.joined_user() == LobbyUser(9, 55, 2, "carol", (3,))


def test_parse_user_action_without_details():
    action = parse_user_action(_u32(10) + _u32(0) + _u32(9))
    assert action == UserAction(10, 0, 9, b"")
    with pytest.raises(PayloadError):
        action.joined_user()


def test_parse_chat_message():
    payload = _u32(42) + b"hello\0"
    assert parse_chat_message(payload, False) == ChatMessage(42, "hello", False)
    assert parse_chat_message(payload, True).emote is True


def test_parse_user_id_and_text_and_user_id():
    payload = _u32(77) + b"newnick\0"
    assert parse_user_id_and_text(payload) == (77, "newnick")
    assert parse_user_id(payload) == 77
    with pytest.raises(PayloadError):
        parse_user_id(b"\x00\x01")


def test_replace_and_find():
    state = _state_with_lobbies()
    assert state.find(20).name == "Second"
    assert state.find(99) is None
    state.replace_lobbies([LobbyInfo(40, "New")])
    assert state.find(10) is None
    assert list(state.lobbies) == [40]


def test_enter_unknown_lobby_raises():
    state = _state_with_lobbies()
    with pytest.raises(KeyError):
        state.enter(99, [])
    assert state.current is None


def test_enter_sets_current_and_users():
    state = _state_with_lobbies()
    users = [LobbyUser(1, 0, 0, "a"), LobbyUser(2, 0, 0, "b")]
    lobby = state.enter(10, users)
    assert lobby is state.current
    assert state.current_id == 10
    assert state.users == users
    assert lobby.user_count == len(users)


def test_join_from_server():
    state = _state_with_lobbies()
    state.enter(10, [])
    action = UserAction(0, 10, 9, _user_details(55, 0, "carol"))
    event, user = state.apply_user_action(action)
    assert event is LobbyEvent.JOINED_SERVER
    assert user.nick == "carol"
    assert state.users == [user]
    assert state.current.user_count == 1


def test_join_from_other_room_decrements_old():
    state = _state_with_lobbies()
    state.enter(10, [])
    before = state.find(20).user_count
    event, user = state.apply_user_action(UserAction(20, 10, 9, _user_details(55, 0, "carol")))
    assert event is LobbyEvent.JOINED_ROOM
    assert user.user_id == 9
    assert state.find(20).user_count == before - 1


def test_leave_to_other_room():
    state = _state_with_lobbies()
    member = LobbyUser(9, 0, 0, "dave")
    state.enter(10, [member])
    before = state.find(20).user_count
    result = state.apply_user_action(UserAction(10, 20, 9))
    assert result == (LobbyEvent.LEFT_ROOM, member)
    assert state.users == []
    assert state.find(20).user_count == before + 1


def test_leave_server_through_action():
    state = _state_with_lobbies()
    member = LobbyUser(9, 0, 0, "dave")
    state.enter(10, [member])
    assert state.apply_user_action(UserAction(10, 0, 9)) == (LobbyEvent.LEFT_SERVER, member)
    assert state.users == []


def test_move_between_other_rooms_updates_counts():
    state = _state_with_lobbies()
    member = LobbyUser(1, 0, 0, "a")
    state.enter(10, [member])
    old_count = state.find(20).user_count
    new_count = state.find(30).user_count
    assert state.apply_user_action(UserAction(20, 30, 5)) is None
    assert state.find(20).user_count == old_count - 1
    assert state.find(30).user_count == new_count + 1
    assert state.users == [member]


def test_user_left_server():
    state = _state_with_lobbies()
    first = LobbyUser(1, 0, 0, "a")
    second = LobbyUser(2, 0, 0, "b")
    state.enter(10, [first, second])
    assert state.user_left_server(1, "timeout") == (LobbyEvent.DISCONNECTED, first)
    assert state.user_left_server(2, "") == (LobbyEvent.LEFT_SERVER, second)
    assert state.user_left_server(3, "") is None
    assert state.users == []


def test_missing_icon_request_none_needed():
    state = _state_with_lobbies()
    state.enter(10, [LobbyUser(1, 0, 0, "a"), LobbyUser(2, 50, 0, "b")])
    assert state.missing_icon_request({50}) is None


def test_missing_icon_request_lists_unknown_icons():
    state = _state_with_lobbies()
    state.enter(
        10,
        [
            LobbyUser(1, 0, 0, "a"),
            LobbyUser(2, 50, 0, "b"),
            LobbyUser(3, 60, 0, "c"),
            LobbyUser(4, 70, 0, "d"),
        ],
    )
    request = state.missing_icon_request([60])
    assert request == _u32(2) + _u32(50) + _u32(70)
    assert len(request) == 4 * 3