"""Core records, WAV parsing, option directives, and naming rules.

WHY: The core package holds everything the encoder depends on: the
immutable records and the code that builds them from files and flags.

HOW: ir.py defines the records, wav_reader.py builds AudioSource from a
RIFF/WAVE stream, options.py builds EncodeOptions from directives,
paths.py holds the input/output naming rules, errors.py the exception
hierarchy.

RULES:
- Records are the contract; change with care
- Nothing in core writes AST bytes
"""
