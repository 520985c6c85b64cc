"""Default settings for the tonalysis command line."""

DEFAULT_LOG_LEVEL = "INFO"
"""Logging level used when none is given on the command line."""

DEFAULT_KEY = "C major"
"""Key assumed when none is given on the command line."""

LOG_FORMAT = "%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s"
"""Format of log records written by the command line."""
