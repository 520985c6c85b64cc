"""Tonal keys and their key signatures.

A TonalKey fixes a tonic and a mode and derives everything the analyzer
and notation layers read from it: the per-letter alteration map (the key
signature), the sharps-versus-flats spelling preference, a signature weight
used by staff layout, and the roman-numeral tables of the key and of its
parallel mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from tonalysis.base import InvalidKeyError, InvalidNoteError
from tonalysis.pitch import (
    LETTERS,
    Accidental,
    AlterationLevel,
    Letter,
    Mode,
    chromatic_add,
    minimal_residue,
)

SIGNATURE_WEIGHT_STEP = 11
"""Signature weight contributed by every altered letter of a key."""


@dataclass(frozen=True)
class TonalKey:
    """An immutable tonic + mode pair with its derived key signature.

    Build instances with `TonalKey.new` or `TonalKey.parse` so the derived
    fields stay consistent with the tonic and mode.
    """

    tonic: Letter
    """Letter of the tonic."""
    tonic_chromatic_index: int
    """Chromatic index (0-11) of the tonic."""
    mode: Mode
    """Major or minor."""
    alterations: Tuple[int, ...]
    """Key-signature alteration of each letter, indexed by letter index."""
    signature_weight: int
    """Accumulated weight of the signature; opaque outside staff layout."""
    sharps: bool
    """True unless the signature contains a flattened letter."""

    @staticmethod
    def new(
        tonic: Union[Letter, str], tonic_chromatic_index: int, mode: Union[Mode, str]
    ) -> TonalKey:
        """Derive a key from its tonic and mode.

        Walks the seven letters upward from the tonic, placing each on the
        mode's semitone pattern and recording how far that target lies from
        the letter's natural position.

        Args:
            tonic: Tonic letter, as a Letter or a letter name.
            tonic_chromatic_index: Chromatic index of the tonic (taken mod 12).
            mode: Major or minor, as a Mode or a mode name.

        Returns:
            The derived TonalKey.

        Raises:
            InvalidKeyError: If the tonic is not a natural letter or the mode
                is not recognized.
        """
        if isinstance(tonic, str):
            try:
                tonic = Letter.parse(tonic)
            except InvalidNoteError:
                raise InvalidKeyError(f"unknown tonic {tonic!r}") from None
        if not isinstance(tonic, Letter):
            raise InvalidKeyError(f"unknown tonic {tonic!r}")
        if isinstance(mode, str):
            mode = Mode.parse(mode)
        if not isinstance(mode, Mode):
            raise InvalidKeyError(f"unknown mode {mode!r}")

        tonic_chromatic_index %= 12
        alterations = [0] * len(LETTERS)
        signature_weight = 0
        sharps = True
        for step, interval in enumerate(mode.intervals):
            letter = tonic.add_steps(step)
            target = chromatic_add(tonic_chromatic_index, interval)
            alteration = minimal_residue(target - letter.natural)
            alterations[letter.index] = alteration
            if alteration != 0:
                signature_weight += SIGNATURE_WEIGHT_STEP
            if alteration < 0:
                sharps = False

        return TonalKey(
            tonic=tonic,
            tonic_chromatic_index=tonic_chromatic_index,
            mode=mode,
            alterations=tuple(alterations),
            signature_weight=signature_weight,
            sharps=sharps,
        )

    @staticmethod
    def parse(text: str) -> TonalKey:
        """Parse a key name such as ``"C"``, ``"Bb major"`` or ``"f# minor"``.

        The mode defaults to major when omitted.

        Raises:
            InvalidKeyError: If the tonic spelling or mode is not recognized.
        """
        from tonalysis.parser import parse_key

        return parse_key(text)

    @property
    def parallel_mode(self) -> Mode:
        return self.mode.parallel

    @property
    def tonic_name(self) -> str:
        """Spelled tonic, e.g. ``"F♯"``."""
        accidental = Accidental.classify(self.tonic_chromatic_index - self.tonic.natural)
        return self.tonic.name + accidental.symbol

    @property
    def name(self) -> str:
        """Display name, e.g. ``"F♯ minor"``."""
        return f"{self.tonic_name} {self.mode.value}"

    def alteration_for(self, letter: Letter) -> AlterationLevel:
        """Return the key-signature alteration applied to a letter."""
        return AlterationLevel(self.alterations[letter.index])

    def prefers_sharps(self) -> bool:
        """Whether accidentals in this key are spelled with sharps."""
        return self.sharps

    def degree_of(self, letter: Letter) -> int:
        """Return the zero-based scale degree a letter occupies in this key."""
        return (letter.index - self.tonic.index) % len(LETTERS)

    def numeral_for(self, letter: Letter) -> str:
        """Return this key's roman numeral for the degree built on a letter."""
        return self.mode.numerals[self.degree_of(letter)]

    def parallel_numeral_for(self, letter: Letter) -> str:
        """Return the parallel mode's roman numeral for a letter, for borrowed chords."""
        return self.parallel_mode.numerals[self.degree_of(letter)]

    def parallel(self) -> TonalKey:
        """Return the key with the same tonic in the other mode."""
        return TonalKey.new(self.tonic, self.tonic_chromatic_index, self.parallel_mode)

    def contains(self, letter: Letter, chromatic_index: int) -> bool:
        """Check whether a spelled pitch belongs to this key's scale."""
        target = chromatic_add(letter.natural, self.alterations[letter.index])
        return target == chromatic_index % 12
