"""MIDI input for chord analysis.

This module turns a stream of MIDI messages (live or from a file) into the
sonorities sounding at each onset, and analyzes them in a key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union, cast

import mido
from mido import Message, MetaMessage

from tonalysis.analyzer import AnalyzedChord, analyze_chord
from tonalysis.key import TonalKey
from tonalysis.note import Note, sort_notes

MidiMessage = Union[Message, MetaMessage]
"""Anything found in a MIDI track; frozen messages are Message subclasses."""


def is_note_on_msg(msg: MidiMessage) -> bool:
    """Check if a message is a true note-on message.

    Args:
        msg: The MIDI message to check.

    Returns:
        True if the message is note_on with velocity > 0.
    """
    return cast(bool, msg.type == "note_on" and msg.velocity > 0)


def is_note_off_msg(msg: MidiMessage) -> bool:
    """Check if a message is a note-off message.

    Args:
        msg: The MIDI message to check.

    Returns:
        True if the message is note_off or note_on with velocity 0.
    """
    return cast(
        bool, (msg.type == "note_on" and msg.velocity == 0) or msg.type == "note_off"
    )


@dataclass(frozen=True)
class Sonority:
    """The MIDI pitches sounding together right after an onset."""

    time: int  # Absolute time of the onset, in the stream's units
    pitches: Tuple[int, ...]  # Ascending MIDI note numbers

    def to_notes(self, key: TonalKey) -> List[Note]:
        """Spell the pitches in a key, lowest first."""
        return sort_notes(Note.from_midi(p, key) for p in self.pitches)


def sonorities(messages: Iterable[MidiMessage]) -> List[Sonority]:
    """Collect the sonority at every instant where a note starts.

    Message times are deltas from the previous message, as in a MIDI track.
    All messages sharing an instant are applied before the sonority is
    taken, so a chord struck at once forms a single sonority.

    Args:
        messages: Delta-timed MIDI messages; non-note messages are skipped.

    Returns:
        Sonorities in time order.
    """
    result: List[Sonority] = []
    sounding: Dict[int, int] = {}
    now = 0
    onset = False

    def flush() -> None:
        if onset and sounding:
            result.append(Sonority(time=now, pitches=tuple(sorted(sounding))))

    for msg in messages:
        if msg.time > 0:
            flush()
            onset = False
            now += msg.time
        if is_note_on_msg(msg):
            sounding[msg.note] = sounding.get(msg.note, 0) + 1
            onset = True
        elif is_note_off_msg(msg):
            count = sounding.get(msg.note, 0)
            if count <= 1:
                sounding.pop(msg.note, None)
            else:
                sounding[msg.note] = count - 1
    flush()
    logging.debug("collected %d sonorities", len(result))
    return result


def read_sonorities(path: Union[str, Path]) -> List[Sonority]:
    """Read a MIDI file and collect its sonorities, with times in ticks.

    Args:
        path: Location of a standard MIDI file.

    Returns:
        Sonorities across all tracks merged, in time order.
    """
    midi_file = mido.MidiFile(str(path))
    logging.info("reading %s (%d tracks)", path, len(midi_file.tracks))
    return sonorities(mido.merge_tracks(midi_file.tracks))


def analyze_sonorities(
    items: Iterable[Sonority], key: TonalKey
) -> List[Tuple[Sonority, AnalyzedChord]]:
    """Analyze each sonority in a key.

    Returns:
        Pairs of each sonority with its analysis.
    """
    return [(s, analyze_chord(s.to_notes(key), key)) for s in items]
