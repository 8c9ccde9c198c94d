"""Run a command once per input line, in parallel."""

__version__ = "0.1.0"
