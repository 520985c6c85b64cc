"""Main entry point for the tonalysis command line.

Analyzes either a chord given as note names or every sonority of a MIDI
file, and prints a chord symbol and roman numeral for each.
"""

import logging
from argparse import ArgumentParser, Namespace
from typing import List, Optional

from tonalysis import constants
from tonalysis.analyzer import AnalyzedChord, analyze_chord
from tonalysis.base import TonalysisError
from tonalysis.key import TonalKey
from tonalysis.midi import analyze_sonorities, read_sonorities
from tonalysis.notation import chord_symbol, roman_numeral_label
from tonalysis.note import sort_notes
from tonalysis.parser import parse_chord


def format_analysis(chord: AnalyzedChord) -> str:
    """Format one analysis as a tab-separated output line.

    Args:
        chord: The analysis to format.

    Returns:
        Chord symbol, roman numeral and, when present, the chord's nature.
    """
    fields = [chord_symbol(chord), roman_numeral_label(chord)]
    if chord.nature is not None:
        fields.append(chord.nature.value)
    return "\t".join(fields)


def run(args: Namespace) -> List[str]:
    """Analyze the chord or file named by parsed arguments.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Output lines, one per analyzed chord.

    Raises:
        TonalysisError: If the key or a note cannot be parsed, or there is
            nothing to analyze.
    """
    key = TonalKey.parse(args.key)
    logging.info("analyzing in %s", key.name)
    if args.midi is not None:
        lines = []
        for sonority, chord in analyze_sonorities(read_sonorities(args.midi), key):
            lines.append(f"{sonority.time}\t{format_analysis(chord)}")
        return lines
    notes = sort_notes(n for text in args.notes for n in parse_chord(text, key))
    return [format_analysis(analyze_chord(notes, key))]


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser configured with all the command-line options
        for tonalysis.
    """
    parser = ArgumentParser(prog="tonalysis")
    parser.add_argument("--log-level", default=constants.DEFAULT_LOG_LEVEL)
    parser.add_argument("--key", default=constants.DEFAULT_KEY)
    parser.add_argument("--midi", default=None)
    parser.add_argument("notes", nargs="*")
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(format=constants.LOG_FORMAT, level=log_level)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for tonalysis.

    Parses command-line arguments, configures logging, runs the analysis
    and prints the results.
    """
    parser = make_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    if args.midi is not None and args.notes:
        parser.error("give either notes or --midi, not both")
    if args.midi is None and not args.notes:
        parser.error("no notes to analyze")
    try:
        lines = run(args)
    except TonalysisError as e:
        parser.error(str(e))
    for line in lines:
        print(line)
    logging.info("done")


if __name__ == "__main__":
    main()
