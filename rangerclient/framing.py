"""Packet framing: the eight-byte header and the trailing counter byte."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from rangerclient.wire import PayloadError

__all__ = ["HEADER_SIZE", "Packet", "decode_header", "PacketCounter", "PacketWriter"]

_HEADER = struct.Struct(">II")
HEADER_SIZE = _HEADER.size
_U32_MAX = 0xFFFFFFFF


def _check_u32(name: str, value: int) -> None:
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} {value} does not fit in 32 bits")


@dataclass(frozen=True)
class Packet:
    """A command and its payload, as carried on the connection."""

    command: int
    payload: bytes = b""

    def encode(self) -> bytes:
        """Header (command, payload length) followed by the payload."""
        payload = bytes(self.payload)
        _check_u32("command", self.command)
        return _HEADER.pack(self.command, len(payload)) + payload


def decode_header(data) -> Tuple[int, int]:
    """Read ``(command, payload_length)`` from the first eight bytes of ``data``."""
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        raise PayloadError(f"packet header needs {HEADER_SIZE} bytes, got {len(data)}")
    command, length = _HEADER.unpack_from(data)
    return command, length


class PacketCounter:
    """Produces the check byte appended to counted outgoing packets.

    The first packet gets 0.  Each later one gets the low byte of the
    previous packet's command, XOR its payload length, XOR the number of
    packets counted so far.
    """

    def __init__(self):
        self.count = 0
        self._last: Optional[Tuple[int, int]] = None

    def next_byte(self, command: int, payload_length: int) -> int:
        if self.count == 0 or self._last is None:
            value = 0
        else:
            last_command, last_length = self._last
            value = (last_command ^ last_length ^ self.count) & 0xFF
        self._last = (command, payload_length)
        self.count += 1
        return value


class PacketWriter:
    """Encodes outgoing packets, appending the counter byte where required."""

    def __init__(self, uncounted_commands: Iterable[int]):
        self.uncounted_commands = frozenset(uncounted_commands)
        self.counter = PacketCounter()

    def encode(self, command: int, payload=b"") -> bytes:
        payload = bytes(payload)
        _check_u32("command", command)
        if command in self.uncounted_commands:
            return Packet(command, payload).encode()
        check = self.counter.next_byte(command, len(payload))
        return _HEADER.pack(command, len(payload) + 1) + payload + bytes([check])