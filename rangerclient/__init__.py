"""Packet codecs and lobby state for a game-matchmaking chat client."""

__version__ = "0.1.0"