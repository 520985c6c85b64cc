"""Pitch space definitions for tonalysis.

This module provides the fixed tables of the tonal pitch space: the seven
natural letters and their chromatic positions, the major and minor interval
patterns with their roman-numeral tables, accidentals, and the circular
(mod-12 / mod-7) arithmetic used throughout the analyzer.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Dict, List, NewType, Tuple

from tonalysis.base import InvalidKeyError, InvalidNoteError, MatchException

MAX_NOTES = 12
"""Number of distinct chromatic indices in an octave."""

MAX_LETTERS = 7
"""Number of natural letters (diatonic steps) in an octave."""

AlterationLevel = NewType("AlterationLevel", int)
"""Signed chromatic alteration of a letter, folded to its minimal residue."""


def minimal_residue(value: int) -> int:
    """Fold a chromatic difference into the range -6..+6.

    Values are first reduced mod 12 and then moved to the representative
    of smallest magnitude, so that 11 becomes -1 and -10 becomes +2.

    Args:
        value: Any integer chromatic difference.

    Returns:
        The equivalent difference in -6..+6.
    """
    v = value % MAX_NOTES
    if v > MAX_NOTES // 2:
        v -= MAX_NOTES
    return v


def chromatic_add(a: int, b: int) -> int:
    """Add two chromatic quantities on the 12-tone circle."""
    return (a + b) % MAX_NOTES


def diatonic_add(a: int, b: int) -> int:
    """Add two letter indices on the 7-letter circle."""
    return (a + b) % MAX_LETTERS


def chromatic_distance(upper: int, lower: int) -> int:
    """Return the ascending semitone distance from lower to upper (0-11)."""
    return (upper - lower) % MAX_NOTES


def diatonic_distance(upper: int, lower: int) -> int:
    """Return the ascending letter distance from lower to upper (0-6)."""
    return (upper - lower) % MAX_LETTERS


@unique
class Letter(Enum):
    """The seven natural pitch letters.

    Values are the natural chromatic positions of each letter relative to C.
    """

    C = 0
    D = 2
    E = 4
    F = 5
    G = 7
    A = 9
    B = 11

    @property
    def natural(self) -> int:
        """Chromatic index of the unaltered letter."""
        return self.value

    @property
    def index(self) -> int:
        """Diatonic position of the letter (C=0 ... B=6)."""
        return _LETTER_INDEX[self]

    def add_steps(self, steps: int) -> Letter:
        """Move this letter by a number of diatonic steps, wrapping mod 7.

        Args:
            steps: Number of letter steps (can be negative).

        Returns:
            The resulting letter.
        """
        return LETTERS[diatonic_add(self.index, steps)]

    @staticmethod
    def parse(text: str) -> Letter:
        """Parse a single letter name, case-insensitively.

        Raises:
            InvalidNoteError: If the text is not one of the seven letters.
        """
        try:
            return Letter[text.strip().upper()]
        except KeyError:
            raise InvalidNoteError(f"unknown letter {text!r}") from None


LETTERS: Tuple[Letter, ...] = tuple(Letter)
"""Letters in diatonic order starting at C."""

_LETTER_INDEX: Dict[Letter, int] = {letter: i for i, letter in enumerate(LETTERS)}


@unique
class Mode(Enum):
    """Tonal modes supported by the analyzer."""

    Major = "major"
    Minor = "minor"

    @property
    def intervals(self) -> Tuple[int, ...]:
        """Semitone offsets of the seven scale degrees above the tonic."""
        if self == Mode.Major:
            return (0, 2, 4, 5, 7, 9, 11)
        elif self == Mode.Minor:
            return (0, 2, 3, 5, 7, 8, 10)
        else:
            raise MatchException(self)

    @property
    def numerals(self) -> Tuple[str, ...]:
        """Roman numerals of the seven scale degrees, cased by diatonic quality."""
        if self == Mode.Major:
            return ("I", "ii", "iii", "IV", "V", "vi", "vii")
        elif self == Mode.Minor:
            return ("i", "ii", "III", "iv", "v", "VI", "VII")
        else:
            raise MatchException(self)

    @property
    def parallel(self) -> Mode:
        """The mode sharing a tonic with this one."""
        return Mode.Minor if self == Mode.Major else Mode.Major

    @staticmethod
    def parse(text: str) -> Mode:
        """Parse a mode name such as ``"major"`` or ``"Minor"``.

        Raises:
            InvalidKeyError: If the mode is not recognized.
        """
        try:
            return Mode(text.strip().lower())
        except ValueError:
            raise InvalidKeyError(f"unknown mode {text!r}") from None


@unique
class Accidental(Enum):
    """Accidentals an analyzed chord or note may carry.

    Values are the chromatic alteration each accidental applies.
    """

    DoubleFlat = -2
    Flat = -1
    Natural = 0
    Sharp = 1
    DoubleSharp = 2

    @property
    def symbol(self) -> str:
        """Printed prefix for this accidental; empty for natural."""
        return _ACCIDENTAL_SYMBOLS[self]

    @staticmethod
    def classify(alteration: int) -> Accidental:
        """Classify a chromatic alteration, folding it to its minimal residue first.

        Alterations of magnitude three or more have no conventional prefix
        and classify as Natural.
        """
        folded = minimal_residue(alteration)
        if -2 <= folded <= 2:
            return Accidental(folded)
        return Accidental.Natural

    @staticmethod
    def parse(text: str) -> Accidental:
        """Parse an accidental written in ASCII (``#``, ``b``, ``x``) or Unicode.

        Raises:
            InvalidNoteError: If the text is not a recognized accidental.
        """
        acc = _ACCIDENTAL_SPELLINGS.get(text)
        if acc is None:
            raise InvalidNoteError(f"unknown accidental {text!r}")
        return acc


_ACCIDENTAL_SYMBOLS: Dict[Accidental, str] = {
    Accidental.DoubleFlat: "♭♭",
    Accidental.Flat: "♭",
    Accidental.Natural: "",
    Accidental.Sharp: "♯",
    Accidental.DoubleSharp: "𝗑",
}

_ACCIDENTAL_SPELLINGS: Dict[str, Accidental] = {
    "": Accidental.Natural,
    "♮": Accidental.Natural,
    "#": Accidental.Sharp,
    "♯": Accidental.Sharp,
    "##": Accidental.DoubleSharp,
    "x": Accidental.DoubleSharp,
    "𝗑": Accidental.DoubleSharp,
    "b": Accidental.Flat,
    "♭": Accidental.Flat,
    "bb": Accidental.DoubleFlat,
    "♭♭": Accidental.DoubleFlat,
}


def _build_spellings(prefer_sharps: bool) -> List[Tuple[Letter, Accidental]]:
    """Build a table spelling each chromatic index with at most one accidental.

    Args:
        prefer_sharps: Whether black keys are spelled as raised letters.

    Returns:
        List of (letter, accidental) pairs indexed by chromatic index.
    """
    table: List[Tuple[Letter, Accidental]] = []
    for chroma in range(MAX_NOTES):
        natural = [letter for letter in LETTERS if letter.natural == chroma]
        if natural:
            table.append((natural[0], Accidental.Natural))
        elif prefer_sharps:
            table.append((NATURAL_LOOKUP[chroma - 1], Accidental.Sharp))
        else:
            table.append((NATURAL_LOOKUP[chroma + 1], Accidental.Flat))
    assert len(table) == MAX_NOTES
    return table


NATURAL_LOOKUP: Dict[int, Letter] = {letter.natural: letter for letter in LETTERS}
"""Lookup from the chromatic index of a white key to its letter."""

SHARP_SPELLINGS = _build_spellings(prefer_sharps=True)
"""Sharp-preferring spelling of each chromatic index (C, C♯, D, D♯ ...)."""

FLAT_SPELLINGS = _build_spellings(prefer_sharps=False)
"""Flat-preferring spelling of each chromatic index (C, D♭, D, E♭ ...)."""
