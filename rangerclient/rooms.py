"""Game rooms, private messages and the notices shown in chat."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import List, Optional

from rangerclient.games import decode_games_list
from rangerclient.wire import PayloadReader, encode_cstring

__all__ = [
    "RoomMember",
    "RoomUserList",
    "PrivateMessage",
    "parse_game_room_user_list",
    "parse_private_message",
    "parse_launch_password",
    "build_join_game_room",
    "format_player_count",
    "joined_room_notice",
    "joined_server_notice",
    "left_room_notice",
    "left_server_notice",
]

_U32 = struct.Struct(">I")


@dataclass(frozen=True)
class RoomMember:
    """A player in a game room."""

    user_id: int
    icon_id: int
    status: int
    nick: str
    game_codes: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class RoomUserList:
    """The players of one game room, in the order the server sent them."""

    room_id: int
    members: List[RoomMember]


@dataclass(frozen=True)
class PrivateMessage:
    """A private message from another user."""

    user_id: int
    nickname: str
    message: str


def _read_games_list(reader: PayloadReader) -> List[int]:
    count = reader.read_u8()
    return decode_games_list(bytes([count]) + reader.read_bytes(count))


def parse_game_room_user_list(payload) -> RoomUserList:
    """Read a game-room user list payload."""
    reader = PayloadReader(payload)
    room_id = reader.read_u32()
    count = reader.read_u32()
    members = []
    for _ in range(count):
        user_id = reader.read_u32()
        icon_id = reader.read_u32()
        status = reader.read_u8()
        nick = reader.read_cstring()
        games = _read_games_list(reader)
        members.append(RoomMember(user_id, icon_id, status, nick, games))
    return RoomUserList(room_id, members)


def parse_private_message(payload) -> PrivateMessage:
    """Read the sender id, nickname and text of a private message."""
    reader = PayloadReader(payload)
    user_id = reader.read_u32()
    nickname = reader.read_cstring()
    message = reader.read_cstring()
    return PrivateMessage(user_id, nickname, message)


def parse_launch_password(payload) -> str:
    """Read the game-room password sent when a game is launched."""
    return PayloadReader(payload).read_cstring()


def build_join_game_room(room_id: int, password: Optional[str] = None) -> bytes:
    """Payload asking to join a room: its id and a NUL-terminated password.

    An unlocked room is joined with ``password`` of ``None``, which sends an
    empty string.
    """
    if not 0 <= room_id <= 0xFFFFFFFF:
        raise ValueError(f"room id {room_id} does not fit in 32 bits")
    return _U32.pack(room_id) + encode_cstring(password or "")


def format_player_count(current: int, maximum: int) -> str:
    return f"{current}/{maximum}"


def joined_room_notice(nick: str) -> str:
    return f"<< {nick} has joined the room >>\n"


def joined_server_notice(nick: str) -> str:
    return f"<< {nick} has joined GameRanger >>\n"


def left_room_notice(nick: str) -> str:
    return f"<< {nick} has left the room >>\n"


def left_server_notice(nick: str, reason: Optional[str] = None) -> str:
    """Notice for a user leaving the server, with the disconnect reason if any."""
    if reason is None:
        return f"<< {nick} has left GameRanger >>\n"
    return f"<< {nick} was disconnected({reason}) >>\n"