from tonalysis.analyzer import (
    AnalyzedChord,
    FiguredBass,
    Inversion,
    Nature,
    SeventhQuality,
    ThirdQuality,
    Voicing,
    analyze_chord,
    analyze_voicing,
)
from tonalysis.base import (
    EmptyChordError,
    InvalidKeyError,
    InvalidNoteError,
    TonalysisError,
)
from tonalysis.key import TonalKey
from tonalysis.note import Note, sort_notes
from tonalysis.parser import parse_chord, parse_key, parse_note
from tonalysis.pitch import Accidental, AlterationLevel, Letter, Mode

__all__ = [
    "Accidental",
    "AlterationLevel",
    "AnalyzedChord",
    "EmptyChordError",
    "FiguredBass",
    "InvalidKeyError",
    "InvalidNoteError",
    "Inversion",
    "Letter",
    "Mode",
    "Nature",
    "Note",
    "SeventhQuality",
    "ThirdQuality",
    "TonalKey",
    "TonalysisError",
    "Voicing",
    "analyze_chord",
    "analyze_voicing",
    "parse_chord",
    "parse_key",
    "parse_note",
    "sort_notes",
]
