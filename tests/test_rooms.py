import struct

import pytest

from rangerclient.games import encode_games_list
from rangerclient.rooms import (
    PrivateMessage,
    RoomMember,
    build_join_game_room,
    format_player_count,
    joined_room_notice,
    joined_server_notice,
    left_room_notice,
    left_server_notice,
    parse_game_room_user_list,
    parse_launch_password,
    parse_private_message,
)
from rangerclient.wire import PayloadError, PayloadReader


def _member_bytes(user_id, icon_id, status, nick, games):
    return (
        struct.pack(">IIB", user_id, icon_id, status)
        + nick.encode("latin-1")
        + b"\x00"
        + encode_games_list(games)
    )


def test_parse_game_room_user_list():
    payload = (
        struct.pack(">II", 77, 2)
        + _member_bytes(10, 20, 1, "alice", [1, 9])
        + _member_bytes(11, 0, 4, "bob", [])
    )
    result = parse_game_room_user_list(payload)
    assert result.room_id == 77
    assert result.members == [
        RoomMember(10, 20, 1, "alice", [1, 9]),
        RoomMember(11, 0, 4, "bob", []),
    ]


def test_parse_game_room_user_list_truncated():
    payload = struct.pack(">II", 1, 1) + struct.pack(">II", 3, 4)
    with pytest.raises(PayloadError):
        parse_game_room_user_list(payload)


def test_parse_private_message():
    payload = struct.pack(">I", 42) + b"carol\x00hello there\x00"
    assert parse_private_message(payload) == PrivateMessage(42, "carol", "hello there")


def test_parse_private_message_unterminated():
    with pytest.raises(PayloadError):
        parse_private_message(struct.pack(">I", 1) + b"dave")


def test_parse_launch_password():
    assert parse_launch_password(b"letmein\x00") == "letmein"


def test_build_join_game_room_unlocked_is_single_nul():
    payload = build_join_game_room(7)
    reader = PayloadReader(payload)
    assert reader.read_u32() == 7
    assert reader.remaining() == b"\x00"


def test_build_join_game_room_with_password_round_trips():
    password = "password"
    payload = build_join_game_room(123456, password)
    reader = PayloadReader(payload)
    assert reader.read_u32() == 123456
    assert reader.read_cstring() == password
    assert reader.remaining() == b""


def test_build_join_game_room_rejects_large_id():
    with pytest.raises(ValueError):
        build_join_game_room(1 << 32)


def test_format_player_count():
    assert format_player_count(3, 8) == "3/8"


def test_notices():
    assert joined_room_notice("eve") == "<< eve has joined the room >>\n"
    assert joined_server_notice("eve") == "<< eve has joined GameRanger >>\n"
    assert left_room_notice("eve") == "<< eve has left the room >>\n"
    assert left_server_notice("eve") == "<< eve has left GameRanger >>\n"


def test_left_server_notice_with_reason():
    assert left_server_notice("eve", "timeout") == "<< eve was disconnected(timeout) >>\n"