"""Harmonic analysis of a single chord within a tonal key.

Given the spelled notes of one sonority (lowest note first) and the active
key, `analyze_chord` finds the functional root by a weighted scan of stacked
thirds, classifies the third, seventh and overall nature of the chord, and
labels it with a roman numeral, figured bass, chromatic prefix and, for
applied chords, the degree it leads to (its forerunner).

The analysis is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from tonalysis.base import EmptyChordError, MatchException
from tonalysis.key import TonalKey
from tonalysis.note import Note
from tonalysis.pitch import (
    Accidental,
    Letter,
    chromatic_add,
    chromatic_distance,
    diatonic_distance,
    minimal_residue,
)

CADENTIAL_MAJOR = "C"
"""Function shown for a major tonic triad in second inversion."""

CADENTIAL_MINOR = "c"
"""Function shown for a minor tonic triad in second inversion."""

BASS_BONUS = 5
"""Score added to a doubling of the bass letter once the chord spans four letters."""

_MAX_ROOT_WEIGHT = 7

# Semitone spans accepted at the third, fifth and seventh letter above a
# root candidate. Higher letters (9th, 11th, 13th) score on presence alone.
_STEP_SPANS: Dict[int, FrozenSet[int]] = {
    2: frozenset({3, 4}),
    4: frozenset({6, 7, 8}),
    6: frozenset({10, 11}),
}


@unique
class ThirdQuality(Enum):
    """Overall triad quality, driven by the third and corrected by the fifth."""

    Major = "major"
    Minor = "minor"
    Diminished = "diminished"
    Augmented = "augmented"

    @property
    def lowered(self) -> bool:
        """Whether roman numerals for this quality are written in lower case."""
        return self in (ThirdQuality.Minor, ThirdQuality.Diminished)


@unique
class SeventhQuality(Enum):
    """Quality of the seventh above the root."""

    Diminished = "diminished"
    Minor = "minor"
    Major = "major"


@unique
class Nature(Enum):
    """Special chord families that need dedicated labelling."""

    Dominant = "dominant"
    FullyDiminished = "fullyDiminished"
    Diminished = "diminished"
    GermanSixth = "germanSixth"
    FrenchSixth = "frenchSixth"
    ItalianSixth = "italianSixth"

    @property
    def is_augmented_sixth(self) -> bool:
        return self in (Nature.GermanSixth, Nature.FrenchSixth, Nature.ItalianSixth)

    @property
    def forerunner_offset(self) -> Tuple[int, int]:
        """Chromatic and letter offsets from the root to the chord's goal.

        Returns:
            Tuple of (semitones, letters) to add to the root.
        """
        if self == Nature.Dominant:
            return (-7, -4)
        elif self in (Nature.Diminished, Nature.FullyDiminished):
            return (1, 1)
        elif self.is_augmented_sixth:
            return (-8, -5)
        else:
            raise MatchException(self)


@unique
class Inversion(Enum):
    """Which chord member sounds in the bass."""

    Root = "root"
    First = "first"
    Second = "second"
    Third = "third"

    @staticmethod
    def from_letters(root: Letter, bass: Letter) -> Inversion:
        """Classify an inversion from the root and bass letters.

        The 1-based letter count from bass up to root is 1 in root position,
        6 with the third in the bass, 4 with the fifth and 2 with the seventh.
        Any other count falls back to root position.
        """
        count = diatonic_distance(root.index, bass.index) + 1
        return _INVERSION_BY_COUNT.get(count, Inversion.Root)


_INVERSION_BY_COUNT: Dict[int, Inversion] = {
    1: Inversion.Root,
    6: Inversion.First,
    4: Inversion.Second,
    2: Inversion.Third,
}


@dataclass(frozen=True)
class FiguredBass:
    """Figured-bass digits written to the right of a roman numeral."""

    upper: str
    lower: str

    def __str__(self) -> str:
        return self.upper + self.lower


_FIGURES: Dict[Tuple[Inversion, bool], FiguredBass] = {
    (Inversion.Root, False): FiguredBass("", ""),
    (Inversion.Root, True): FiguredBass("7", ""),
    (Inversion.First, False): FiguredBass("6", ""),
    (Inversion.First, True): FiguredBass("6", "5"),
    (Inversion.Second, False): FiguredBass("6", "4"),
    (Inversion.Second, True): FiguredBass("4", "3"),
    (Inversion.Third, True): FiguredBass("4", "2"),
}

CADENTIAL_FIGURES = _FIGURES[(Inversion.Second, False)]


@dataclass(frozen=True)
class Voicing:
    """The notes of one sonority with the sounding bass held apart.

    Notes above the bass keep the order they were given in; that order is
    the scan order used when choosing a root.
    """

    bass: Note
    upper: Tuple[Note, ...]

    @staticmethod
    def of(notes: Iterable[Note]) -> Voicing:
        """Build a voicing whose bass is the first note given.

        Raises:
            EmptyChordError: If there are no notes.
        """
        ordered = tuple(notes)
        if not ordered:
            raise EmptyChordError()
        return Voicing(bass=ordered[0], upper=ordered[1:])

    @property
    def notes(self) -> Tuple[Note, ...]:
        """All notes, bass first."""
        return (self.bass,) + self.upper

    def on_letter(self, letter: Letter) -> List[Note]:
        """Return every note spelled on the given letter."""
        return [n for n in self.notes if n.letter == letter]

    def intervals_above(self, root: Note, steps: int) -> List[int]:
        """Semitone distances from root to the notes a number of letters above it."""
        letter = root.letter.add_steps(steps)
        return [
            chromatic_distance(n.chromatic_index, root.chromatic_index)
            for n in self.on_letter(letter)
        ]


@dataclass(frozen=True)
class AnalyzedChord:
    """The harmonic label of one chord. Built fresh by every analysis."""

    root: Note
    """Functional root."""
    bass: Note
    """Sounding bass, the lowest note of the voicing."""
    function: str
    """Roman numeral, cased by quality, or a cadential symbol."""
    alteration: Accidental
    """Chromatic prefix of the root against the key signature."""
    third_quality: ThirdQuality
    seventh_quality: Optional[SeventhQuality]
    nature: Optional[Nature]
    inversion: Inversion
    figures: FiguredBass
    forerunner: Optional[str]
    """Degree this chord is applied to, e.g. ``"ii"`` for V/ii."""

    @property
    def fundamental(self) -> Note:
        return self.bass

    @property
    def is_augmented_sixth(self) -> bool:
        return self.nature is not None and self.nature.is_augmented_sixth

    @property
    def is_cadential(self) -> bool:
        return self.function in (CADENTIAL_MAJOR, CADENTIAL_MINOR)

    @property
    def quality_marker(self) -> str:
        """Superscript marker for the numeral: ``°``, ``ø``, ``+`` or nothing."""
        if self.third_quality == ThirdQuality.Diminished:
            if self.seventh_quality == SeventhQuality.Minor:
                return "ø"
            return "°"
        elif self.third_quality == ThirdQuality.Augmented:
            return "+"
        else:
            return ""


def score_root_candidate(candidate: Note, voicing: Voicing, letters_seen: int) -> int:
    """Score how well a note explains the voicing as its root.

    Seven letter positions are scanned in thirds from the candidate itself
    up to the thirteenth, with weights 7 down to 1. The third, fifth and
    seventh only count at chord-tone distances; the unison and the upper
    extensions count whenever their letter is present.

    Args:
        candidate: Note being tried as the root.
        voicing: The whole chord.
        letters_seen: Distinct letters scanned so far, including the candidate.

    Returns:
        The candidate's score.
    """
    score = 0
    weight = _MAX_ROOT_WEIGHT
    for steps in range(0, 2 * _MAX_ROOT_WEIGHT, 2):
        intervals = voicing.intervals_above(candidate, steps)
        if intervals:
            spans = _STEP_SPANS.get(steps)
            if spans is None or any(i in spans for i in intervals):
                score += weight
        weight -= 1
    if candidate.letter == voicing.bass.letter and letters_seen > 3:
        score += BASS_BONUS
    return score


def find_root(voicing: Voicing) -> Note:
    """Choose the functional root of a voicing.

    Candidates are scanned bass first; the highest score wins and ties go
    to the candidate scanned first.
    """
    best: Optional[Note] = None
    best_score = 0
    seen: set[Letter] = set()
    for note in voicing.notes:
        seen.add(note.letter)
        score = score_root_candidate(note, voicing, len(seen))
        logging.debug("root candidate %s scores %d", note, score)
        if best is None or score > best_score:
            best = note
            best_score = score
    assert best is not None
    logging.debug("chose root %s", best)
    return best


def classify_third(root: Note, voicing: Voicing, numeral: str) -> ThirdQuality:
    """Classify the chord's quality from its third and fifth.

    The key's numeral for the root seeds the quality when no third sounds.
    A diminished or augmented fifth then overrides the third.
    """
    quality = ThirdQuality.Major if numeral == numeral.upper() else ThirdQuality.Minor
    for interval in voicing.intervals_above(root, 2):
        if interval == 3:
            quality = ThirdQuality.Minor
        elif interval == 4:
            quality = ThirdQuality.Major
    for interval in voicing.intervals_above(root, 4):
        if interval == 6:
            return ThirdQuality.Diminished
        elif interval == 8:
            return ThirdQuality.Augmented
    return quality


def classify_seventh(root: Note, voicing: Voicing) -> Optional[SeventhQuality]:
    """Classify the seventh above the root, if one sounds at a known size."""
    quality: Optional[SeventhQuality] = None
    for interval in voicing.intervals_above(root, 6):
        if interval == 9:
            quality = SeventhQuality.Diminished
        elif interval == 10:
            quality = SeventhQuality.Minor
        elif interval == 11:
            quality = SeventhQuality.Major
    return quality


def find_augmented_sixth(root: Note, voicing: Voicing) -> Optional[Nature]:
    """Detect an augmented sixth above the root and name its family."""
    if 10 not in voicing.intervals_above(root, 5):
        return None
    if 7 in voicing.intervals_above(root, 4):
        return Nature.GermanSixth
    if 6 in voicing.intervals_above(root, 3):
        return Nature.FrenchSixth
    return Nature.ItalianSixth


def classify_nature(
    root: Note,
    voicing: Voicing,
    third: ThirdQuality,
    seventh: Optional[SeventhQuality],
) -> Optional[Nature]:
    """Name the chord family, if it is one that needs special labelling.

    The augmented-sixth scan runs last and replaces any dominant or
    diminished result.
    """
    nature: Optional[Nature] = None
    if third == ThirdQuality.Major and seventh == SeventhQuality.Minor:
        nature = Nature.Dominant
    elif third == ThirdQuality.Diminished and seventh == SeventhQuality.Diminished:
        nature = Nature.FullyDiminished
    elif third == ThirdQuality.Diminished and seventh is None:
        nature = Nature.Diminished
    sixth = find_augmented_sixth(root, voicing)
    if sixth is not None:
        nature = sixth
    return nature


def find_figures(root: Note, voicing: Voicing) -> Tuple[Inversion, FiguredBass]:
    """Determine the inversion and its figured-bass digits."""
    inversion = Inversion.from_letters(root.letter, voicing.bass.letter)
    has_seventh = bool(voicing.on_letter(root.letter.add_steps(6)))
    return inversion, _FIGURES[(inversion, has_seventh)]


def root_accidental(root: Note, key: TonalKey) -> Accidental:
    """Chromatic prefix of the root relative to the key signature."""
    return Accidental.classify(root.key_alteration(key))


def find_forerunner(root: Note, key: TonalKey, nature: Optional[Nature]) -> Optional[str]:
    """Find the degree an applied chord leads to.

    Dominants resolve down a fifth, diminished chords up a semitone and
    augmented sixths to the chord a minor sixth below. A goal off the key's
    scale borrows its numeral from the parallel mode and takes an accidental.

    Returns:
        The goal's numeral with its accidental, or None when the chord is
        not special or leads to the tonic.
    """
    if nature is None:
        return None
    semitones, letters = nature.forerunner_offset
    goal_chroma = chromatic_add(root.chromatic_index, semitones)
    goal_letter = root.letter.add_steps(letters)
    alteration = minimal_residue(
        goal_chroma - (goal_letter.natural + key.alteration_for(goal_letter))
    )
    if alteration == 0:
        numeral = key.numeral_for(goal_letter)
    else:
        numeral = key.parallel_numeral_for(goal_letter)
    if numeral.upper() == "I":
        return None
    return Accidental.classify(alteration).symbol + numeral


def analyze_voicing(voicing: Voicing, key: TonalKey) -> AnalyzedChord:
    """Analyze a voicing in a key. See `analyze_chord`."""
    root = find_root(voicing)
    numeral = key.numeral_for(root.letter)
    inversion, figures = find_figures(root, voicing)
    alteration = root_accidental(root, key)

    third = classify_third(root, voicing, numeral)
    seventh = classify_seventh(root, voicing)
    function = numeral.lower() if third.lowered else numeral.upper()

    nature = classify_nature(root, voicing, third, seventh)
    forerunner = find_forerunner(root, key, nature)

    if forerunner is not None:
        if nature == Nature.Dominant:
            function = "V"
        elif nature in (Nature.Diminished, Nature.FullyDiminished):
            function = "vii"

    if function.upper() == "I" and figures == CADENTIAL_FIGURES:
        function = CADENTIAL_MAJOR if function == "I" else CADENTIAL_MINOR

    return AnalyzedChord(
        root=root,
        bass=voicing.bass,
        function=function,
        alteration=alteration,
        third_quality=third,
        seventh_quality=seventh,
        nature=nature,
        inversion=inversion,
        figures=figures,
        forerunner=forerunner,
    )


def analyze_chord(notes: Iterable[Note], key: TonalKey) -> AnalyzedChord:
    """Label a chord with its root, quality, inversion and roman numeral.

    Args:
        notes: The chord's notes, lowest first. The first note is taken as
            the sounding bass; use `sort_notes` to order raw input.
        key: The active key.

    Returns:
        The chord's harmonic label.

    Raises:
        EmptyChordError: If no notes are given.
    """
    return analyze_voicing(Voicing.of(notes), key)
