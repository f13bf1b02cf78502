"""Timed vocabulary quiz with a shared leaderboard."""

__version__ = "0.1.0"
