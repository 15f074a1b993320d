"""Game-list bitfields and the plugin list sent at login."""

from __future__ import annotations

import struct
from typing import Dict, Iterable, List

from rangerclient.plugin import UNKNOWN_GAME_CODE, Plugin
from rangerclient.wire import PayloadError

__all__ = ["encode_games_list", "decode_games_list", "encode_plugin_list"]

_BITS = 8
_U16 = struct.Struct(">H")


def encode_games_list(game_codes: Iterable[int]) -> bytes:
    """Encode game codes as a count byte followed by a bitfield.

    Code ``n`` sets bit ``(n - 1) % 8`` of byte ``(n - 1) // 8``.  Codes of
    zero or below, and the unknown code, set no bit.
    """
    codes = [-1 if code == UNKNOWN_GAME_CODE else code for code in game_codes]
    if not codes:
        return b"\x00"
    byte_count = max(max(codes), 0) // _BITS + 1
    if byte_count > 0xFF:
        raise ValueError(f"game code {max(codes)} is too large for a games list")
    field = bytearray(byte_count)
    for code in codes:
        if code <= 0:
            continue
        index, bit = divmod(code - 1, _BITS)
        field[index] |= 1 << bit
    return bytes([byte_count]) + bytes(field)


def decode_games_list(data) -> List[int]:
    """Decode a count-prefixed bitfield into ascending game codes."""
    data = bytes(data)
    if not data:
        raise PayloadError("games list is empty")
    count = data[0]
    field = data[1:1 + count]
    if len(field) < count:
        raise PayloadError(f"games list needs {count} bytes, got {len(field)}")
    return [
        index * _BITS + bit + 1
        for index, byte in enumerate(field)
        for bit in range(_BITS)
        if byte & (1 << bit)
    ]


def encode_plugin_list(plugins: Iterable[Plugin]) -> bytes:
    """Encode plugins as a 16-bit count and (code, option) entries sorted by code.

    Plugins with code zero or the unknown code are left out.
    """
    first_by_code: Dict[int, Plugin] = {}
    codes: List[int] = []
    for plugin in plugins:
        code = plugin.game_code
        if code in (0, UNKNOWN_GAME_CODE):
            continue
        codes.append(code)
        first_by_code.setdefault(code, plugin)
    codes.sort()

    entries = bytearray()
    for code in codes:
        option = bytes(first_by_code[code].unknown_option)
        if len(option) != 4:
            raise ValueError(f"plugin {code} option must be 4 bytes, got {len(option)}")
        try:
            entries += _U16.pack(code)
        except struct.error as exc:
            raise ValueError(f"game code {code} does not fit in 16 bits") from exc
        entries += option
    return _U16.pack(len(codes)) + bytes(entries)