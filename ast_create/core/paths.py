"""Input and output file naming rules.

WHY: The converter names its output after the input (``song.wav`` →
``song.ast``) and accepts an explicit override. Both sides need checks that
happen before any audio is read or written: a wildcard or a non-WAV input is
almost always a user mistake, and an output name with shell-hostile
characters should not silently create an odd file.

HOW: Small pure functions over pathlib paths. check_input_path() raises,
has_illegal_characters() only reports so the caller can decide to ignore
an override, finalize_output_path() appends the .ast extension.

RULES:
- Input must end in .wav or .wave (case-insensitive) and contain no '*'
- Default output: input with its extension replaced by .ast
- Output names always end in .ast; a bare ".ast" is rejected
- Illegal override characters: * ? " < > | and a ':' after the last separator
"""

from __future__ import annotations

from pathlib import Path

from ast_create.config import (
    ILLEGAL_OUTPUT_CHARACTERS,
    OUTPUT_EXTENSION,
    SUPPORTED_INPUT_EXTENSIONS,
)
from ast_create.core.errors import InputPathError, InvalidOutputPath


def check_input_path(path: str | Path) -> Path:
    """Validate the input name and return it as a Path.

    RULES:
    - '*' anywhere is rejected (one file at a time)
    - No extension and a wrong extension get distinct messages
    """
    text = str(path)
    if "*" in text:
        raise InputPathError(
            "Only a single input file can be converted at a time. Please "
            "enter an exact file name (avoid using '*')."
        )

    input_path = Path(text)
    suffix = input_path.suffix.lower()
    if suffix in SUPPORTED_INPUT_EXTENSIONS:
        return input_path
    if not suffix:
        raise InputPathError(
            "Source file contains no extension! The filename should be "
            "followed with \".wav\", assuming the source is indeed a WAV file."
        )
    raise InputPathError("Source file must be a WAV file!")


def default_output_path(input_path: str | Path) -> str:
    """``music/theme.wav`` → ``music/theme.ast``."""
    return str(Path(input_path).with_suffix(OUTPUT_EXTENSION))


def has_illegal_characters(output_path: str) -> bool:
    """True when ``output_path`` should not be used as an output name."""
    if any(ch in output_path for ch in ILLEGAL_OUTPUT_CHARACTERS):
        return True
    # A drive colon is only legal before the last directory separator
    return output_path.rfind(":") > max(output_path.rfind("/"), output_path.rfind("\\"))


def finalize_output_path(output_path: str) -> Path:
    """Append .ast when missing and reject names with no stem.

    Args:
        output_path: Default or user-supplied output path.

    Returns:
        The path the AST file will be written to.
    """
    if not output_path.lower().endswith(OUTPUT_EXTENSION):
        output_path += OUTPUT_EXTENSION
    if Path(output_path).name.lower() == OUTPUT_EXTENSION:
        raise InvalidOutputPath(
            "Output filename can not be restricted exclusively to .ast extension!"
        )
    return Path(output_path)
