"""Parser for note, key and chord text using Lark."""

from __future__ import annotations

from typing import List, Optional, Tuple

from lark import Lark, Transformer, UnexpectedInput

from tonalysis.base import InvalidKeyError, InvalidNoteError
from tonalysis.key import TonalKey
from tonalysis.note import Note
from tonalysis.pitch import Accidental, Letter, Mode

# Lark grammar for spelled pitches. A pitch is a letter, an optional
# accidental (ASCII or Unicode) and an octave; a key is a tonic with an
# optional mode name; a chord is pitches separated by spaces or commas.
NOTATION_GRAMMAR = r"""
LETTER: /[A-Ga-g]/
ACCIDENTAL: /##|bb|#|b|x|♯|♭♭|♭|𝗑|♮/
OCTAVE: /-?\d+/
MODE: /[A-Za-z]+/
_WS: /\s+/
_SEP: /[\s,]+/

note: _WS? pitch _WS?
pitch: LETTER ACCIDENTAL? OCTAVE
key: _WS? LETTER ACCIDENTAL? (_WS MODE)? _WS?
chord: _SEP? pitch (_SEP pitch)* _SEP?
"""

PitchParts = Tuple[Letter, Accidental, int]
KeyParts = Tuple[Letter, Accidental, Optional[str]]


class NotationTransformer(Transformer):
    """Transform parse trees into pitch and key parts."""

    def pitch(self, items) -> PitchParts:
        """Transform a pitch like ``F#4`` into (letter, accidental, octave)."""
        parts = {token.type: str(token) for token in items}
        letter = Letter.parse(parts["LETTER"])
        accidental = Accidental.parse(parts.get("ACCIDENTAL", ""))
        return (letter, accidental, int(parts["OCTAVE"]))

    def note(self, items) -> PitchParts:
        return items[0]

    def chord(self, items) -> List[PitchParts]:
        return list(items)

    def key(self, items) -> KeyParts:
        """Transform a key like ``Bb minor``; the mode name is checked later."""
        parts = {token.type: str(token) for token in items}
        letter = Letter.parse(parts["LETTER"])
        accidental = Accidental.parse(parts.get("ACCIDENTAL", ""))
        return (letter, accidental, parts.get("MODE"))


_PARSER = Lark(NOTATION_GRAMMAR, start=["note", "key", "chord"])
_TRANSFORMER = NotationTransformer()


def _parse_pitches(text: str, start: str):
    try:
        tree = _PARSER.parse(text, start=start)
    except UnexpectedInput:
        raise InvalidNoteError(f"cannot parse {text!r}") from None
    return _TRANSFORMER.transform(tree)


def parse_note(text: str, key: Optional[TonalKey] = None) -> Note:
    """Parse note text such as ``"C4"``, ``"F#3"``, ``"Bb2"`` or ``"E♭5"``.

    Args:
        text: Letter, optional accidental and octave number.
        key: Key to attach to the note, if any.

    Returns:
        The parsed Note.

    Raises:
        InvalidNoteError: If the text is not a single spelled pitch.
    """
    letter, accidental, octave = _parse_pitches(text, "note")
    return Note.new(letter, octave, accidental, key)


def parse_chord(text: str, key: Optional[TonalKey] = None) -> List[Note]:
    """Parse a chord written as notes separated by spaces or commas.

    Examples:
        >>> [str(n) for n in parse_chord("C4 E4 G4")]
        ['C4', 'E4', 'G4']
        >>> [str(n) for n in parse_chord("Ab3,C4,F#4")]
        ['A♭3', 'C4', 'F♯4']

    Raises:
        InvalidNoteError: If any note cannot be parsed or there are none.
    """
    return [
        Note.new(letter, octave, accidental, key)
        for letter, accidental, octave in _parse_pitches(text, "chord")
    ]


def parse_key(text: str) -> TonalKey:
    """Parse a key name such as ``"C"``, ``"Bb major"`` or ``"f# minor"``.

    The mode defaults to major when omitted.

    Raises:
        InvalidKeyError: If the tonic spelling or mode is not recognized.
    """
    try:
        tree = _PARSER.parse(text, start="key")
    except UnexpectedInput:
        raise InvalidKeyError(f"cannot parse {text!r}") from None
    letter, accidental, mode_name = _TRANSFORMER.transform(tree)
    mode = Mode.parse(mode_name) if mode_name is not None else Mode.Major
    return TonalKey.new(letter, letter.natural + accidental.value, mode)
