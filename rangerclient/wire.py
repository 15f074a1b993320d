"""Reading and writing the primitive fields of server payloads.

All integers on the wire are big-endian.  Strings are NUL-terminated and
carry one character per byte.
"""

from __future__ import annotations

import struct

__all__ = ["PayloadError", "PayloadReader", "encode_cstring"]

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_TEXT_ENCODING = "latin-1"


class PayloadError(ValueError):
    """A payload is shorter than, or shaped differently from, what was expected."""


class PayloadReader:
    """Sequential reader over a payload.

    A read that would run past the end raises :class:`PayloadError` and
    leaves the position where it was.
    """

    def __init__(self, data):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Offset of the next unread byte."""
        return self._pos

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def _take(self, count: int) -> bytes:
        if count < 0:
            raise PayloadError(f"cannot read a negative number of bytes ({count})")
        end = self._pos + count
        if end > len(self._data):
            raise PayloadError(
                f"need {count} bytes at offset {self._pos}, only {len(self)} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16(self) -> int:
        return _U16.unpack(self._take(_U16.size))[0]

    def read_u32(self) -> int:
        return _U32.unpack(self._take(_U32.size))[0]

    def read_bytes(self, count: int) -> bytes:
        return self._take(count)

    def read_cstring(self) -> str:
        """Read characters up to a NUL byte and step past the terminator."""
        end = self._data.find(b"\0", self._pos)
        if end < 0:
            raise PayloadError(f"unterminated string at offset {self._pos}")
        text = self._data[self._pos:end].decode(_TEXT_ENCODING)
        self._pos = end + 1
        return text

    def skip(self, count: int) -> None:
        self._take(count)

    def remaining(self) -> bytes:
        """The unread bytes, without consuming them."""
        return self._data[self._pos:]


def encode_cstring(text: str) -> bytes:
    """Encode ``text`` as a NUL-terminated string."""
    if "\0" in text:
        raise PayloadError("string may not contain a NUL character")
    try:
        encoded = text.encode(_TEXT_ENCODING)
    except UnicodeEncodeError as exc:
        raise PayloadError(f"string cannot be sent: {exc.reason}") from exc
    return encoded + b"\0"