"""The payload of the login request."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable, Tuple

from rangerclient.games import encode_games_list, encode_plugin_list
from rangerclient.plugin import Plugin
from rangerclient.wire import PayloadError

__all__ = [
    "LoginRequest",
    "obfuscate_mac",
    "lan_ip_field",
    "build_login_payload",
    "LOOPBACK_IP",
    "OPTIONS",
    "LOCATION",
    "STATIC_BLOCK",
]

_U32 = struct.Struct(">I")
_MAC_LENGTH = 6
_MAC_MASK = 0x77
_TAIL_LENGTH = 4

EMAIL_LOGIN = 2
ID_LOGIN = 1
LOOPBACK_IP = 0x7F000001
OPTIONS = b"\x00\x00\x00\x08" + bytes(12)
LOCATION = bytes(12)
STATIC_BLOCK = b"\x90\x09\x21\x00\x00\x00\x00"


@dataclass(frozen=True)
class LoginRequest:
    """What the client needs to log in.

    An account with no known id (``gr_id`` of 0) logs in by e-mail address;
    otherwise it logs in by id.  ``checksum`` is the verification value the
    server expects for this login.
    """

    password: str
    email: str = ""
    gr_id: int = 0
    mac_address: bytes = bytes(_MAC_LENGTH)
    checksum: int = 0
    game_codes: Tuple[int, ...] = ()
    lan_ip: int = LOOPBACK_IP

    @property
    def email_login(self) -> bool:
        return self.gr_id == 0


def _u32(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"{name} {value} does not fit in 32 bits")
    return _U32.pack(value)


def obfuscate_mac(mac_address) -> bytes:
    """XOR each byte of a six-byte hardware address with 0x77."""
    mac = bytes(mac_address)
    if len(mac) != _MAC_LENGTH:
        raise ValueError(f"hardware address must be {_MAC_LENGTH} bytes, got {len(mac)}")
    return bytes(byte ^ _MAC_MASK for byte in mac)


def lan_ip_field(ip: int = LOOPBACK_IP) -> bytes:
    """The LAN address as sent at login: big-endian with every bit inverted."""
    return _u32("address", ip ^ 0xFFFFFFFF) if 0 <= ip <= 0xFFFFFFFF else _u32("address", ip)


def _length_prefixed(what: str, text: str) -> bytes:
    try:
        encoded = text.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise ValueError(f"{what} cannot be sent: {exc.reason}") from exc
    if len(encoded) > 0xFF:
        raise ValueError(f"{what} is longer than 255 bytes")
    return bytes([len(encoded)]) + encoded


def _games_block(game_codes: Iterable[int]) -> bytes:
    encoded = encode_games_list(game_codes)
    if encoded[0] == 0:
        return b""
    # At login the leading byte counts itself as well as the bitfield.
    return bytes([encoded[0] + 1]) + encoded[1:]


def build_login_payload(request: LoginRequest, plugins: Iterable[Plugin], tail) -> bytes:
    """Assemble the login payload.

    ``tail`` is the payload of the server's ready-to-process packet; its
    first four bytes close the login payload.
    """
    tail = bytes(tail)
    if len(tail) < _TAIL_LENGTH:
        raise PayloadError(f"login tail needs {_TAIL_LENGTH} bytes, got {len(tail)}")

    parts = [
        bytes([EMAIL_LOGIN if request.email_login else ID_LOGIN]),
        _u32("user id", 0 if request.email_login else request.gr_id),
        obfuscate_mac(request.mac_address),
        lan_ip_field(request.lan_ip),
        _u32("checksum", request.checksum),
        _length_prefixed("password", request.password),
        _length_prefixed("e-mail address", request.email)
        if request.email_login
        else _u32("user id", request.gr_id),
        OPTIONS,
        _games_block(request.game_codes),
        LOCATION,
        STATIC_BLOCK,
        encode_plugin_list(plugins),
        tail[:_TAIL_LENGTH],
    ]
    return b"".join(parts)