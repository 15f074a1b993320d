"""Public lobbies: their list, the users in the current one and the moves between them."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from rangerclient.games import decode_games_list
from rangerclient.wire import PayloadReader

__all__ = [
    "LobbyInfo",
    "LobbyUser",
    "UserAction",
    "ChatMessage",
    "LobbyEvent",
    "LobbyState",
    "parse_public_lobby_list",
    "parse_lobby_user_list",
    "parse_user_action",
    "parse_chat_message",
    "parse_user_id_and_text",
    "parse_user_id",
]

_U32 = struct.Struct(">I")
_OFF_SERVER = 0


@dataclass
class LobbyInfo:
    """A public lobby and the number of users the server reports in it."""

    lobby_id: int
    name: str
    lobby_type: int = 0
    user_count: int = 0


@dataclass(frozen=True)
class LobbyUser:
    """A user present in a lobby."""

    user_id: int
    icon_id: int
    status: int
    nick: str
    game_codes: Tuple[int, ...] = ()


@dataclass(frozen=True)
class UserAction:
    """A user moving from one lobby to another.

    A lobby id of 0 stands for being off the server.  ``details`` holds the
    bytes after the three ids, which describe the user when the move is
    into the lobby the client is in.
    """

    previous_lobby: int
    new_lobby: int
    user_id: int
    details: bytes = field(default=b"", repr=False)

    def joined_user(self) -> LobbyUser:
        """Decode ``details`` into the user who joined."""
        reader = PayloadReader(self.details)
        icon_id = reader.read_u32()
        status = reader.read_u8()
        nick = reader.read_cstring()
        games = _read_games_list(reader)
        return LobbyUser(self.user_id, icon_id, status, nick, games)


@dataclass(frozen=True)
class ChatMessage:
    """A line of lobby chat; ``emote`` marks a third-person action message."""

    user_id: int
    text: str
    emote: bool = False


class LobbyEvent(enum.Enum):
    """What a change to the current lobby means for the user involved."""

    JOINED_ROOM = "joined_room"
    JOINED_SERVER = "joined_server"
    LEFT_ROOM = "left_room"
    LEFT_SERVER = "left_server"
    DISCONNECTED = "disconnected"


def _read_games_list(reader: PayloadReader) -> Tuple[int, ...]:
    count = reader.read_u8()
    return tuple(decode_games_list(bytes([count]) + reader.read_bytes(count)))


def _read_user(reader: PayloadReader) -> LobbyUser:
    user_id = reader.read_u32()
    icon_id = reader.read_u32()
    status = reader.read_u8()
    nick = reader.read_cstring()
    games = _read_games_list(reader)
    return LobbyUser(user_id, icon_id, status, nick, games)


def parse_public_lobby_list(payload) -> List[LobbyInfo]:
    """Read the list of public lobbies.

    Layout: a 32-bit count, then for each lobby a 32-bit id, a 32-bit user
    count, a type byte and a NUL-terminated name.
    """
    reader = PayloadReader(payload)
    count = reader.read_u32()
    lobbies = []
    for _ in range(count):
        lobby_id = reader.read_u32()
        users = reader.read_u32()
        lobby_type = reader.read_u8()
        name = reader.read_cstring()
        lobbies.append(LobbyInfo(lobby_id, name, lobby_type, users))
    return lobbies


def parse_lobby_user_list(payload) -> Tuple[int, List[LobbyUser]]:
    """Read the user list of a lobby; returns ``(lobby_id, users)``."""
    reader = PayloadReader(payload)
    reader.skip(4)
    lobby_id = reader.read_u32()
    count = reader.read_u32()
    reader.skip(4)
    return lobby_id, [_read_user(reader) for _ in range(count)]


def parse_user_action(payload) -> UserAction:
    """Read a user's move between lobbies."""
    reader = PayloadReader(payload)
    previous_lobby = reader.read_u32()
    new_lobby = reader.read_u32()
    user_id = reader.read_u32()
    return UserAction(previous_lobby, new_lobby, user_id, reader.remaining())


def parse_chat_message(payload, emote: bool = False) -> ChatMessage:
    """Read a lobby chat line: the sender's id and the text."""
    user_id, text = parse_user_id_and_text(payload)
    return ChatMessage(user_id, text, bool(emote))


def parse_user_id_and_text(payload) -> Tuple[int, str]:
    """Read a 32-bit user id followed by a NUL-terminated string."""
    reader = PayloadReader(payload)
    user_id = reader.read_u32()
    return user_id, reader.read_cstring()


def parse_user_id(payload) -> int:
    """Read the 32-bit user id that opens a payload."""
    return PayloadReader(payload).read_u32()


class LobbyState:
    """The known lobbies, which one the client is in, and who is there."""

    def __init__(self):
        self.lobbies: Dict[int, LobbyInfo] = {}
        self.current_id: Optional[int] = None
        self.users: List[LobbyUser] = []

    @property
    def current(self) -> Optional[LobbyInfo]:
        if self.current_id is None:
            return None
        return self.lobbies.get(self.current_id)

    def replace_lobbies(self, lobbies: Iterable[LobbyInfo]) -> None:
        """Forget the known lobbies and keep these instead."""
        self.lobbies = {lobby.lobby_id: lobby for lobby in lobbies}
        if self.current_id not in self.lobbies:
            self.current_id = None
            self.users = []

    def find(self, lobby_id: int) -> Optional[LobbyInfo]:
        return self.lobbies.get(lobby_id)

    def enter(self, lobby_id: int, users: Iterable[LobbyUser]) -> LobbyInfo:
        """Make ``lobby_id`` current with ``users`` as its occupants."""
        lobby = self.find(lobby_id)
        if lobby is None:
            raise KeyError(f"no lobby with id {lobby_id} for this user list")
        self.current_id = lobby_id
        self.users = list(users)
        lobby.user_count = len(self.users)
        return lobby

    def _find_user(self, user_id: int) -> Optional[LobbyUser]:
        return next((user for user in self.users if user.user_id == user_id), None)

    def _add(self, user: LobbyUser) -> None:
        self.users.append(user)
        lobby = self.current
        if lobby is not None:
            lobby.user_count += 1

    def _remove(self, user_id: int) -> Optional[LobbyUser]:
        user = self._find_user(user_id)
        if user is None:
            return None
        self.users.remove(user)
        lobby = self.current
        if lobby is not None:
            lobby.user_count = max(0, lobby.user_count - 1)
        return user

    def _adjust(self, lobby_id: int, delta: int) -> None:
        lobby = self.find(lobby_id)
        if lobby is not None:
            lobby.user_count = max(0, lobby.user_count + delta)

    def apply_user_action(self, action: UserAction) -> Optional[Tuple[LobbyEvent, LobbyUser]]:
        """Apply a move between lobbies.

        Returns the event and the user concerned when the move touches the
        current lobby, or ``None`` when only other lobbies' counts changed
        or the departing user was not known.
        """
        current_id = self.current_id
        if current_id is not None and action.new_lobby == current_id:
            user = action.joined_user()
            self._add(user)
            if action.previous_lobby == _OFF_SERVER:
                return LobbyEvent.JOINED_SERVER, user
            self._adjust(action.previous_lobby, -1)
            return LobbyEvent.JOINED_ROOM, user

        if current_id is not None and action.previous_lobby == current_id:
            user = self._remove(action.user_id)
            if action.new_lobby == _OFF_SERVER:
                event = LobbyEvent.LEFT_SERVER
            else:
                event = LobbyEvent.LEFT_ROOM
                self._adjust(action.new_lobby, 1)
            return None if user is None else (event, user)

        self._adjust(action.previous_lobby, -1)
        self._adjust(action.new_lobby, 1)
        return None

    def user_left_server(
        self, user_id: int, reason: str = ""
    ) -> Optional[Tuple[LobbyEvent, LobbyUser]]:
        """Remove a user who left the server; a reason means a disconnection."""
        user = self._remove(user_id)
        if user is None:
            return None
        event = LobbyEvent.DISCONNECTED if reason else LobbyEvent.LEFT_SERVER
        return event, user

    def missing_icon_request(self, known_icons: Iterable[int]) -> Optional[bytes]:
        """Payload asking for the icons of users whose icon is not known.

        Icon id 0 is never requested.  Returns ``None`` when nothing is missing.
        """
        known = set(known_icons)
        missing = [
            user.icon_id
            for user in self.users
            if user.icon_id != 0 and user.icon_id not in known
        ]
        if not missing:
            return None
        return _U32.pack(len(missing)) + b"".join(_U32.pack(icon) for icon in missing)