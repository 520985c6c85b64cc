"""Base exceptions for tonalysis.

This module provides the error taxonomy shared by the pitch, key, note and
analysis layers, plus the exception used for exhaustive enum dispatch.
"""

from __future__ import annotations

from typing import Any


class TonalysisError(Exception):
    """Base class for all errors raised deliberately by tonalysis."""


class InvalidKeyError(TonalysisError):
    """Raised when a tonal key is built from an unknown tonic or mode."""

    def __init__(self, reason: str) -> None:
        """Initialize an InvalidKeyError.

        Args:
            reason: Description of the rejected tonic or mode.
        """
        super().__init__(f"Invalid key: {reason}")


class InvalidNoteError(TonalysisError):
    """Raised when note text or a MIDI number cannot be turned into a Note."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid note: {reason}")


class EmptyChordError(TonalysisError):
    """Raised when chord analysis is requested for zero notes.

    Callers are expected to guard empty measures before analysis.
    """

    def __init__(self) -> None:
        super().__init__("Cannot analyze a chord with no notes")


class MatchException(Exception):
    """Exception raised when pattern matching fails."""

    def __init__(self, value: Any) -> None:
        """Initialize a MatchException with the unmatched value.

        Args:
            value: The value that failed to match any pattern.
        """
        super().__init__(f"Failed to match value: {value}")
