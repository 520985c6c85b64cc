"""Voiced notes for chord analysis.

A Note is a spelled pitch in a specific octave. Spelling matters: C♯4 and
D♭4 share a chromatic index but sit on different letters, and the analyzer
reasons about letters (diatonic steps) as well as semitones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from tonalysis.base import InvalidNoteError
from tonalysis.key import TonalKey
from tonalysis.pitch import (
    FLAT_SPELLINGS,
    LETTERS,
    MAX_NOTES,
    SHARP_SPELLINGS,
    Accidental,
    Letter,
    minimal_residue,
)

MIDI_MIN = 0
MIDI_MAX = 127


@dataclass(frozen=True)
class Note:
    """A single spelled pitch in a voicing.

    Octaves follow scientific pitch notation on the letter, so B♯3 and C4
    sound the same but B♯3 sits one staff step lower.
    """

    letter: Letter
    octave: int
    chromatic_index: int
    offset: int = 0  # Notation stacking hint; ignored by analysis
    key: Optional[TonalKey] = None  # Key the note was entered in, if any

    def __post_init__(self) -> None:
        if not 0 <= self.chromatic_index < MAX_NOTES:
            raise InvalidNoteError(f"chromatic index {self.chromatic_index} out of range")

    @property
    def letter_index(self) -> int:
        return self.letter.index

    @property
    def natural(self) -> int:
        return self.letter.natural

    @property
    def alteration(self) -> int:
        """Signed distance from the natural letter, e.g. -1 for B♭."""
        return minimal_residue(self.chromatic_index - self.natural)

    @property
    def accidental(self) -> Accidental:
        return Accidental.classify(self.alteration)

    @property
    def staff_index(self) -> int:
        """Diatonic staff position counting letters from C0."""
        return self.letter_index + len(LETTERS) * self.octave

    @property
    def midi(self) -> int:
        """MIDI note number of this pitch (C4 = 60)."""
        return MAX_NOTES * (self.octave + 1) + self.natural + self.alteration

    @property
    def name(self) -> str:
        """Spelled pitch class, e.g. ``"E♭"``."""
        return self.letter.name + self.accidental.symbol

    def key_alteration(self, key: Optional[TonalKey] = None) -> int:
        """Return how far this note departs from the key signature's letter.

        Args:
            key: Key to measure against; defaults to the owning key, and to
                an all-natural signature when the note has none.

        Returns:
            Minimal-residue alteration relative to the signature.
        """
        key = key if key is not None else self.key
        signature = key.alteration_for(self.letter) if key is not None else 0
        return minimal_residue(self.chromatic_index - (self.natural + signature))

    def __str__(self) -> str:
        return f"{self.name}{self.octave}"

    @staticmethod
    def new(
        letter: Letter,
        octave: int,
        accidental: Accidental = Accidental.Natural,
        key: Optional[TonalKey] = None,
    ) -> Note:
        """Build a note from its letter, octave and accidental."""
        chroma = (letter.natural + accidental.value) % MAX_NOTES
        return Note(letter=letter, octave=octave, chromatic_index=chroma, key=key)

    @staticmethod
    def parse(text: str, key: Optional[TonalKey] = None) -> Note:
        """Parse note text such as ``"C4"``, ``"F#3"``, ``"Bb2"`` or ``"E♭5"``.

        Raises:
            InvalidNoteError: If the text is not a letter, optional accidental
                and octave number.
        """
        from tonalysis.parser import parse_note

        return parse_note(text, key)

    @staticmethod
    def from_midi(number: int, key: Optional[TonalKey] = None) -> Note:
        """Spell a MIDI note number within a key.

        Pitches belonging to the key take the key's letter (E♯ in F♯ major);
        other pitches take a single sharp or flat per the key's preference.

        Raises:
            InvalidNoteError: If the number is outside the MIDI range.
        """
        if not MIDI_MIN <= number <= MIDI_MAX:
            raise InvalidNoteError(f"MIDI number {number} out of range")
        chroma = number % MAX_NOTES
        letter: Optional[Letter] = None
        if key is not None:
            for candidate in LETTERS:
                if key.contains(candidate, chroma):
                    letter = candidate
                    break
        if letter is None:
            sharps = key.prefers_sharps() if key is not None else True
            table = SHARP_SPELLINGS if sharps else FLAT_SPELLINGS
            letter, _ = table[chroma]
        alteration = minimal_residue(chroma - letter.natural)
        octave = (number - letter.natural - alteration) // MAX_NOTES - 1
        return Note(letter=letter, octave=octave, chromatic_index=chroma, key=key)


def sort_notes(notes: Iterable[Note]) -> List[Note]:
    """Order notes from the lowest staff position upward.

    The sort is stable, so notes sharing a staff position keep their
    original relative order. The first note of the result is the bass.
    """
    return sorted(notes, key=lambda n: n.staff_index)
