"""Product feedback board: feedback items, threaded comments and mention notifications."""

__version__ = "1.0.0"
