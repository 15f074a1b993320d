"""Advertising banners sent by the server and saving them to disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from rangerclient.wire import PayloadReader

__all__ = ["Banner", "parse_banners", "banner_extension", "save_banner"]

_SIGNATURES = (
    (b"FWS", "swf"),
    (b"GIF", "gif"),
    (b"\xff\xd8", "jpg"),
)


@dataclass(frozen=True)
class Banner:
    """One banner: its identifier and raw file contents."""

    banner_id: int
    data: bytes


def parse_banners(payload) -> List[Banner]:
    """Read the banners from an application-banner payload.

    Layout: a 32-bit count, then for each banner a 32-bit id, a 32-bit
    length, four unknown bytes and ``length`` bytes of data.
    """
    reader = PayloadReader(payload)
    count = reader.read_u32()
    banners = []
    for _ in range(count):
        banner_id = reader.read_u32()
        length = reader.read_u32()
        reader.skip(4)
        banners.append(Banner(banner_id, reader.read_bytes(length)))
    return banners


def banner_extension(data) -> str:
    """File extension for banner data, chosen by its signature; empty if unknown."""
    data = bytes(data)
    for signature, extension in _SIGNATURES:
        if data.startswith(signature):
            return extension
    return ""


def save_banner(directory, banner: Banner) -> Path:
    """Write ``banner`` into ``directory`` and return the path written."""
    name = f"banner{banner.banner_id:08X}.{banner_extension(banner.data)}"
    path = Path(directory) / name
    path.write_bytes(banner.data)
    return path