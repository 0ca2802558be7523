"""Two-player chess rules engine with a line-protocol game layer."""

__version__ = "0.1.0"
