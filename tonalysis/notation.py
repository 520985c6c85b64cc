"""Plain-text notation for analyzed chords and notes.

These helpers turn analysis results into the strings a score shows: the
roman numeral under the staff, the chord symbol above it, and the
accidental printed before a note given the key signature.
"""

from __future__ import annotations

from typing import Dict

from tonalysis.analyzer import AnalyzedChord, Nature, SeventhQuality, ThirdQuality
from tonalysis.base import MatchException
from tonalysis.key import TonalKey
from tonalysis.note import Note

_AUGMENTED_SIXTH_NAMES: Dict[Nature, str] = {
    Nature.GermanSixth: "Ger",
    Nature.FrenchSixth: "Fr",
    Nature.ItalianSixth: "It",
}


def _forerunner_suffix(chord: AnalyzedChord) -> str:
    return f" / {chord.forerunner}" if chord.forerunner is not None else ""


def roman_numeral_label(chord: AnalyzedChord) -> str:
    """Render a chord's roman numeral, e.g. ``"V65 / ii"`` or ``"It+6"``."""
    if chord.nature is not None and chord.nature.is_augmented_sixth:
        return _AUGMENTED_SIXTH_NAMES[chord.nature] + "+6" + _forerunner_suffix(chord)
    return (
        chord.alteration.symbol
        + chord.function
        + chord.quality_marker
        + str(chord.figures)
        + _forerunner_suffix(chord)
    )


def _symbol_suffix(chord: AnalyzedChord) -> str:
    if chord.is_augmented_sixth:
        return "7"
    third = chord.third_quality
    seventh = chord.seventh_quality
    if third == ThirdQuality.Major:
        if seventh == SeventhQuality.Minor:
            return "7"
        elif seventh == SeventhQuality.Major:
            return "maj7"
        return ""
    elif third == ThirdQuality.Minor:
        return "7" if seventh == SeventhQuality.Minor else ""
    elif third == ThirdQuality.Diminished:
        if seventh == SeventhQuality.Minor:
            return "m7♭5"
        elif seventh == SeventhQuality.Diminished:
            return "dim7"
        return "dim"
    elif third == ThirdQuality.Augmented:
        return "aug"
    else:
        raise MatchException(third)


def chord_symbol(chord: AnalyzedChord) -> str:
    """Render a lead-sheet style symbol, e.g. ``"G7"``, ``"d / F"``.

    Minor and diminished roots are written in lower case. A bass on another
    letter than the root is appended after a slash.
    """
    letter = chord.root.letter.name
    if chord.third_quality.lowered:
        letter = letter.lower()
    symbol = letter + chord.root.accidental.symbol + _symbol_suffix(chord)
    if chord.bass.letter != chord.root.letter:
        symbol += f" / {chord.bass.name}"
    return symbol


def accidental_text(alteration: int) -> str:
    """Spell an absolute alteration as printed accidentals, with ♮ for zero."""
    if alteration == 0:
        return "♮"
    elif alteration > 0:
        return "𝗑" * (alteration // 2) + "♯" * (alteration % 2)
    else:
        return "♭" * -alteration


def note_accidental(note: Note, key: TonalKey) -> str:
    """Return the accidental a staff shows before a note in a key.

    Notes that agree with the key signature print nothing. Otherwise the
    full accidental is printed, including naturals cancelling the signature.
    """
    departure = note.key_alteration(key)
    if departure == 0:
        return ""
    return accidental_text(key.alteration_for(note.letter) + departure)


def note_name(note: Note) -> str:
    """Render a note with its octave, e.g. ``"C♯4"``."""
    return str(note)
