"""Adapter for driving a headless coding agent binary over JSON-lines stdio."""

__version__ = "0.1.0"
