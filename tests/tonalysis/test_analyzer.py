"""Tests for single-chord harmonic analysis."""

import logging
from typing import Optional

import pytest

from tonalysis.analyzer import (
    CADENTIAL_MAJOR,
    CADENTIAL_MINOR,
    AnalyzedChord,
    FiguredBass,
    Inversion,
    Nature,
    SeventhQuality,
    ThirdQuality,
    Voicing,
    analyze_chord,
    classify_nature,
    find_augmented_sixth,
    find_root,
    score_root_candidate,
)
from tonalysis.base import EmptyChordError
from tonalysis.key import TonalKey
from tonalysis.note import Note
from tonalysis.pitch import Accidental, Letter

C_MAJOR = TonalKey.parse("C major")
C_MINOR = TonalKey.parse("C minor")
A_MINOR = TonalKey.parse("A minor")


def analyze(key: TonalKey, *texts: str) -> AnalyzedChord:
    """Analyze notes given as text, in the order given."""
    return analyze_chord([Note.parse(t, key) for t in texts], key)


def voicing(*texts: str) -> Voicing:
    return Voicing.of(Note.parse(t) for t in texts)


def test_empty_chord() -> None:
    with pytest.raises(EmptyChordError):
        analyze_chord([], C_MAJOR)
    with pytest.raises(EmptyChordError):
        Voicing.of([])


def test_voicing_keeps_bass_apart() -> None:
    v = voicing("E3", "G3", "C4")
    assert str(v.bass) == "E3"
    assert [str(n) for n in v.upper] == ["G3", "C4"]
    assert [str(n) for n in v.notes] == ["E3", "G3", "C4"]
    assert [str(n) for n in v.on_letter(Letter.C)] == ["C4"]
    assert v.intervals_above(Note.parse("C4"), 2) == [4]


def test_tonic_triad() -> None:
    chord = analyze(C_MAJOR, "C4", "E4", "G4")
    assert str(chord.root) == "C4"
    assert str(chord.bass) == "C4"
    assert chord.fundamental == chord.bass
    assert chord.function == "I"
    assert chord.alteration == Accidental.Natural
    assert chord.third_quality == ThirdQuality.Major
    assert chord.seventh_quality is None
    assert chord.nature is None
    assert chord.inversion == Inversion.Root
    assert chord.figures == FiguredBass("", "")
    assert chord.forerunner is None


def test_tonic_first_inversion() -> None:
    chord = analyze(C_MAJOR, "E3", "G3", "C4")
    assert chord.root.letter == Letter.C
    assert chord.bass.letter == Letter.E
    assert chord.function == "I"
    assert chord.inversion == Inversion.First
    assert chord.figures == FiguredBass("6", "")


def test_cadential_six_four() -> None:
    chord = analyze(C_MAJOR, "G3", "C4", "E4")
    assert chord.root.letter == Letter.C
    assert chord.inversion == Inversion.Second
    assert chord.figures == FiguredBass("6", "4")
    assert chord.function == CADENTIAL_MAJOR
    assert chord.is_cadential


def test_cadential_six_four_minor() -> None:
    chord = analyze(C_MINOR, "G3", "C4", "Eb4")
    assert chord.third_quality == ThirdQuality.Minor
    assert chord.function == CADENTIAL_MINOR


def test_dominant_seventh() -> None:
    chord = analyze(C_MAJOR, "G3", "B3", "D4", "F4")
    assert chord.root.letter == Letter.G
    assert chord.function == "V"
    assert chord.third_quality == ThirdQuality.Major
    assert chord.seventh_quality == SeventhQuality.Minor
    assert chord.nature == Nature.Dominant
    assert chord.figures == FiguredBass("7", "")
    assert chord.forerunner is None


@pytest.mark.parametrize(
    "texts, inversion, figures",
    [
        (("G3", "B3", "D4", "F4"), Inversion.Root, FiguredBass("7", "")),
        (("B2", "D3", "F3", "G3"), Inversion.First, FiguredBass("6", "5")),
        (("D3", "F3", "G3", "B3"), Inversion.Second, FiguredBass("4", "3")),
        (("F3", "G3", "B3", "D4"), Inversion.Third, FiguredBass("4", "2")),
    ],
)
def test_seventh_chord_inversions(
    texts: tuple, inversion: Inversion, figures: FiguredBass
) -> None:
    chord = analyze(C_MAJOR, *texts)
    assert chord.root.letter == Letter.G
    assert chord.function == "V"
    assert chord.inversion == inversion
    assert chord.figures == figures


def test_secondary_dominant() -> None:
    chord = analyze(C_MAJOR, "A3", "C#4", "E4", "G4")
    assert chord.root.letter == Letter.A
    assert chord.third_quality == ThirdQuality.Major
    assert chord.seventh_quality == SeventhQuality.Minor
    assert chord.nature == Nature.Dominant
    assert chord.forerunner == "ii"
    assert chord.function == "V"
    assert chord.alteration == Accidental.Natural


def test_secondary_dominant_of_borrowed_degree() -> None:
    chord = analyze(C_MAJOR, "Eb3", "G3", "Bb3", "Db4")
    assert chord.root.letter == Letter.E
    assert chord.alteration == Accidental.Flat
    assert chord.nature == Nature.Dominant
    assert chord.forerunner == "♭VI"
    assert chord.function == "V"


def test_dominant_in_minor_resolves_to_tonic() -> None:
    chord = analyze(A_MINOR, "E3", "G#3", "B3", "D4")
    assert chord.function == "V"
    assert chord.nature == Nature.Dominant
    assert chord.forerunner is None


def test_diminished_triad() -> None:
    chord = analyze(C_MAJOR, "B3", "D4", "F4")
    assert chord.root.letter == Letter.B
    assert chord.third_quality == ThirdQuality.Diminished
    assert chord.seventh_quality is None
    assert chord.nature == Nature.Diminished
    assert chord.function == "vii"
    assert chord.quality_marker == "°"
    assert chord.forerunner is None


def test_half_diminished_seventh() -> None:
    chord = analyze(C_MAJOR, "B3", "D4", "F4", "A4")
    assert chord.third_quality == ThirdQuality.Diminished
    assert chord.seventh_quality == SeventhQuality.Minor
    assert chord.nature is None
    assert chord.quality_marker == "ø"
    assert chord.figures == FiguredBass("7", "")


def test_fully_diminished_seventh() -> None:
    chord = analyze(C_MAJOR, "B3", "D4", "F4", "Ab4", "B4")
    assert chord.root.letter == Letter.B
    assert chord.seventh_quality == SeventhQuality.Diminished
    assert chord.nature == Nature.FullyDiminished
    assert chord.function == "vii"
    assert chord.quality_marker == "°"


def test_augmented_triad() -> None:
    chord = analyze(C_MAJOR, "C4", "E4", "G#4")
    assert chord.third_quality == ThirdQuality.Augmented
    assert chord.function == "I"
    assert chord.quality_marker == "+"
    assert chord.nature is None


@pytest.mark.parametrize(
    "texts, expected",
    [
        (("D4", "A4"), ThirdQuality.Minor),
        (("G3", "D4"), ThirdQuality.Major),
    ],
)
def test_third_seeded_from_key(texts: tuple, expected: ThirdQuality) -> None:
    """Without a third the key's numeral decides the quality."""
    assert analyze(C_MAJOR, *texts).third_quality == expected


def test_german_sixth() -> None:
    chord = analyze(C_MAJOR, "Ab3", "C4", "Eb4", "F#4")
    assert chord.root.letter == Letter.A
    assert chord.alteration == Accidental.Flat
    assert chord.nature == Nature.GermanSixth
    assert chord.is_augmented_sixth
    assert chord.forerunner is None


def test_italian_sixth() -> None:
    chord = analyze(C_MAJOR, "Ab3", "C4", "F#4")
    assert chord.root.letter == Letter.A
    assert chord.nature == Nature.ItalianSixth


def test_french_sixth_shape() -> None:
    root = Note.parse("Ab3")
    v = voicing("Ab3", "C4", "D4", "F#4")
    assert find_augmented_sixth(root, v) == Nature.FrenchSixth
    assert find_augmented_sixth(Note.parse("C4"), v) is None


def test_augmented_sixth_overrides_diminished() -> None:
    """A diminished triad with an augmented sixth above its root is an augmented sixth."""
    chord = analyze(C_MAJOR, "B3", "D4", "F4", "G##4")
    assert chord.root.letter == Letter.B
    assert chord.third_quality == ThirdQuality.Diminished
    assert chord.nature == Nature.ItalianSixth
    assert chord.forerunner == "♯ii"
    assert chord.function == "vii"


def test_classify_nature_precedence() -> None:
    root = Note.parse("C4")
    v = voicing("C4", "E4", "G4", "Bb4", "A#4")
    assert (
        classify_nature(root, v, ThirdQuality.Major, SeventhQuality.Minor)
        == Nature.GermanSixth
    )
    plain = voicing("C4", "E4", "G4", "Bb4")
    assert (
        classify_nature(root, plain, ThirdQuality.Major, SeventhQuality.Minor)
        == Nature.Dominant
    )


def test_bass_doubling_bonus_applies() -> None:
    """A late doubling of the bass letter in a four-letter chord earns the bonus."""
    without = analyze(C_MAJOR, "F3", "A3", "C4", "D4")
    assert without.root.letter == Letter.D
    assert without.function == "ii"
    assert without.figures == FiguredBass("6", "5")

    doubled = analyze(C_MAJOR, "F3", "A3", "C4", "D4", "F4")
    assert str(doubled.root) == "F4"
    assert doubled.function == "IV"
    assert doubled.inversion == Inversion.Root
    assert doubled.figures == FiguredBass("", "")


def test_bass_doubling_bonus_needs_four_letters_first() -> None:
    """The bonus counts only letters scanned so far, so an early doubling misses it."""
    chord = analyze(C_MAJOR, "F3", "F4", "A3", "C4", "D4")
    assert chord.root.letter == Letter.D


def test_root_scores() -> None:
    v = voicing("C4", "E4", "G4")
    assert score_root_candidate(Note.parse("C4"), v, 1) == 18
    assert score_root_candidate(Note.parse("E4"), v, 2) == 14
    assert score_root_candidate(Note.parse("G4"), v, 3) == 10


def test_root_ties_go_to_first_candidate() -> None:
    v = voicing("C4", "E4", "G4", "C5")
    assert str(find_root(v)) == "C4"


@pytest.mark.parametrize(
    "texts",
    [
        ("C4", "E4", "G4"),
        ("A3", "C#4", "E4", "G4"),
        ("Ab3", "C4", "Eb4", "F#4"),
        ("B3", "D4", "F4", "Ab4", "B4"),
    ],
)
def test_analysis_is_repeatable(texts: tuple) -> None:
    first = analyze(C_MAJOR, *texts)
    second = analyze(C_MAJOR, *texts)
    assert first == second
    assert repr(first) == repr(second)


def test_minor_triad() -> None:
    chord = analyze(C_MAJOR, "D4", "F4", "A4")
    assert chord.third_quality == ThirdQuality.Minor
    assert chord.function == "ii"
    assert chord.quality_marker == ""


@pytest.mark.parametrize(
    "texts, alteration, function, forerunner",
    [
        (("F##3", "A##3", "C##4", "E#4"), Accidental.DoubleSharp, "V", "♯VII"),
        (("Cb4", "Eb4", "Gb4"), Accidental.Flat, "I", None),
        (("Ebb3", "Gb3", "Bbb3", "Dbb4"), Accidental.DoubleFlat, "V", "♭♭VI"),
    ],
)
def test_prefixes_fold_wrapped_alterations(
    texts: tuple, alteration: Accidental, function: str, forerunner: Optional[str]
) -> None:
    """Root and forerunner prefixes come from alterations folded out of ±11."""
    chord = analyze(C_MAJOR, *texts)
    assert chord.root.letter == Note.parse(texts[0]).letter
    assert chord.alteration == alteration
    assert chord.function == function
    assert chord.forerunner == forerunner


def test_find_root_logs_each_candidate(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)
    find_root(voicing("C4", "E4", "G4"))
    assert "root candidate C4 scores 18" in caplog.text
    assert "root candidate E4 scores 14" in caplog.text
    assert "chose root C4" in caplog.text
