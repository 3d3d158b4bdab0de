"""
Engine exception types.
"""

from __future__ import annotations

from pathlib import Path


class EngineError(Exception):
    """Base class for errors raised by the engine."""


class DataError(EngineError):
    """
    A data file exists but cannot be used.

    Attributes:
        path: The offending file
        reason: Human readable description of the problem
    """

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")
