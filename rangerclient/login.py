"""Messages the server sends while logging in."""

from __future__ import annotations

from dataclasses import dataclass

from rangerclient.wire import PayloadReader

__all__ = [
    "MyUserInfo",
    "parse_my_user_info",
    "parse_ban_time",
    "format_ban_time",
    "parse_server_message",
]

_SECONDS_PER_DAY = 86400
_SECONDS_PER_HOUR = 3600
_SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class MyUserInfo:
    """The account details the server reports for the logged-in user."""

    user_id: int
    email: str
    nickname: str
    real_name: str


def parse_my_user_info(payload) -> MyUserInfo:
    """Read the own-user-info payload.

    Layout: four unknown bytes, a 32-bit user id, then the e-mail address,
    nickname and real name as NUL-terminated strings.
    """
    reader = PayloadReader(payload)
    reader.skip(4)
    user_id = reader.read_u32()
    email = reader.read_cstring()
    nickname = reader.read_cstring()
    real_name = reader.read_cstring()
    return MyUserInfo(user_id, email, nickname, real_name)


def parse_ban_time(payload) -> int:
    """Seconds of ban left, from a ban-time payload."""
    return PayloadReader(payload).read_u32()


def format_ban_time(seconds: int) -> str:
    """Spell out a ban duration in days, hours, minutes and seconds."""
    if seconds < 0:
        raise ValueError("ban time cannot be negative")
    days = seconds // _SECONDS_PER_DAY
    hours = (seconds % _SECONDS_PER_DAY) // _SECONDS_PER_HOUR
    minutes = (seconds % _SECONDS_PER_HOUR) // _SECONDS_PER_MINUTE
    secs = seconds % _SECONDS_PER_MINUTE
    return f"{days} days, {hours} hours, {minutes} minutes, {secs} seconds\n"


def parse_server_message(payload) -> str:
    """Read a server message, turning carriage returns into newlines."""
    return PayloadReader(payload).read_cstring().replace("\r", "\n")