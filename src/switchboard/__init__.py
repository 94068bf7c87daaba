"""switchboard - a plugin-driven command switchboard for the terminal."""

__version__ = "0.1.0"
