"""Payloads of the simple requests the client sends to the server."""

from __future__ import annotations

import struct

from rangerclient.wire import encode_cstring

__all__ = [
    "build_join_lobby",
    "build_user_info_request",
    "build_text_request",
    "build_change_password",
    "build_alive_pulse",
]

_U32 = struct.Struct(">I")


def _pack_id(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"{name} {value} does not fit in 32 bits")
    return _U32.pack(value)


def build_join_lobby(lobby_id: int) -> bytes:
    """Payload asking to move into a public lobby."""
    return _pack_id("lobby id", lobby_id)


def build_user_info_request(user_id: int) -> bytes:
    """Payload asking for another user's profile."""
    return _pack_id("user id", user_id)


def build_text_request(text: str) -> bytes:
    """Payload carrying a single line of text.

    Used for lobby chat and for changing the nickname or real name; blank
    text is refused.
    """
    if not text:
        raise ValueError("text may not be blank")
    return encode_cstring(text)


def build_change_password(old_password: str, new_password: str) -> bytes:
    """Payload changing the account password: the old and new one, each NUL-terminated."""
    if not new_password:
        raise ValueError("new password may not be blank")
    return encode_cstring(old_password) + encode_cstring(new_password)


def build_alive_pulse() -> bytes:
    """Payload of the keep-alive packet, which carries nothing."""
    return b""