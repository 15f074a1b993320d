"""Game plugin descriptions and their 16x16 palette icons."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from rangerclient.wire import PayloadError

__all__ = ["Plugin", "load_plugin", "icon_to_rgb", "plugin_sort_key", "UNKNOWN_GAME_CODE"]

UNKNOWN_GAME_CODE = 0xFFFFFFFF
ICON_SIZE = 16

_CODE_OFFSET = 0x2D
_OPTION_OFFSET = 0x32
_OPTION_LENGTH = 4
_NAME_LENGTH_OFFSET = 0x36
_NAME_OFFSET = 0x37
_ICON_MARKER = b"s8"
_ICON_MARKER_SKIP = 6
_ICON_BYTES = ICON_SIZE * ICON_SIZE

Pixel = Tuple[int, int, int]
Image = Tuple[Tuple[Pixel, ...], ...]


def icon_to_rgb(data, color_table) -> Optional[Image]:
    """Turn 256 palette indices into 16 rows of 16 RGB triples.

    Returns ``None`` when there is no colour table.
    """
    if color_table is None:
        return None
    data = bytes(data)
    table = bytes(color_table)
    if len(data) < _ICON_BYTES:
        raise PayloadError(f"icon needs {_ICON_BYTES} bytes, got {len(data)}")

    def pixel(index: int) -> Pixel:
        base = index * 3
        if base + 3 > len(table):
            raise PayloadError(f"colour index {index} outside the colour table")
        return table[base], table[base + 1], table[base + 2]

    return tuple(
        tuple(pixel(data[row * ICON_SIZE + col]) for col in range(ICON_SIZE))
        for row in range(ICON_SIZE)
    )


@dataclass
class Plugin:
    """A game the client knows about."""

    game_code: int = UNKNOWN_GAME_CODE
    game_name: str = "Default Game Name"
    unknown_option: bytes = b"\x00" * _OPTION_LENGTH
    image: Optional[Image] = None

    @classmethod
    def from_bytes(cls, data, color_table) -> "Plugin":
        """Read a plugin from the contents of its file."""
        data = bytes(data)
        if len(data) < _NAME_OFFSET:
            raise PayloadError("plugin file too short for its header")
        name_length = data[_NAME_LENGTH_OFFSET]
        name_bytes = data[_NAME_OFFSET:_NAME_OFFSET + name_length]
        if len(name_bytes) < name_length:
            raise PayloadError("plugin file too short for its game name")

        image = None
        marker = data.find(_ICON_MARKER, 1)
        if marker >= 0:
            start = marker + _ICON_MARKER_SKIP
            icon = data[start:start + _ICON_BYTES]
            if len(icon) < _ICON_BYTES:
                raise PayloadError("plugin file too short for its icon")
            image = icon_to_rgb(icon, color_table)

        return cls(
            game_code=data[_CODE_OFFSET],
            game_name=name_bytes.decode("latin-1"),
            unknown_option=data[_OPTION_OFFSET:_OPTION_OFFSET + _OPTION_LENGTH],
            image=image,
        )


def load_plugin(path, color_table) -> Plugin:
    """Read a plugin file from disk."""
    return Plugin.from_bytes(Path(path).read_bytes(), color_table)


def plugin_sort_key(plugin: Plugin) -> int:
    """Order plugins by the first letter of their name, ignoring case."""
    if not plugin.game_name:
        return 0
    first = ord(plugin.game_name[0])
    return first - 32 if first >= 97 else first