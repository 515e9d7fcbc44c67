"""Typed failures raised by the reader, the option directives, and the encoder.

WHY: The CLI has to turn every failure into a one-line diagnostic and exit
code 1, while tests and library callers need to tell a corrupt WAV from an
empty selection or an unwritable output path. A small exception hierarchy
gives both: one base class to catch, specific classes to assert on.

HOW: AstCreateError is the common base. FormatError covers everything the
WAV reader rejects, EncodeError everything found while resolving options and
writing the container, InputPathError the input name checks done before the
file is opened.

RULES:
- Messages are complete sentences suitable for direct display
- Nothing here is raised after output bytes have been written, except
  OutputCreateFailed for I/O errors during the write itself
- Correctable conditions (loop start past the end) are never errors
"""

from __future__ import annotations


class AstCreateError(Exception):
    """Base class for every failure the converter reports."""


# ---------------------------------------------------------------------------
# WAV parsing
# ---------------------------------------------------------------------------


class FormatError(AstCreateError):
    """The input is not a WAV file this converter can read."""


class InvalidContainer(FormatError):
    """Missing RIFF/WAVE signature, or a fmt chunk cut short."""


class MissingFmtChunk(FormatError):
    """The stream ended before a 'fmt ' sub-chunk was found."""


class InvalidChannelCount(FormatError):
    """Channel count outside 1-16.

    RULES:
    - num_channels holds the value read from the fmt chunk
    """

    def __init__(self, num_channels: int) -> None:
        self.num_channels = num_channels
        super().__init__(
            "Invalid number of channels ({}). Please use a file containing "
            "1-16 channels.".format(num_channels)
        )


class UnsupportedBitDepth(FormatError):
    """Bits per sample other than 16."""

    def __init__(self, bits_per_sample: int) -> None:
        self.bits_per_sample = bits_per_sample
        super().__init__(
            "Unsupported bit depth ({} bits). Please make sure you are using "
            "16-bit PCM.".format(bits_per_sample)
        )


class MissingDataChunk(FormatError):
    """The stream ended before a 'data' sub-chunk was found."""


class TruncatedDataChunk(FormatError):
    """The data chunk holds fewer bytes than its header declares."""

    def __init__(self, declared: int, available: int) -> None:
        self.declared = declared
        self.available = available
        super().__init__(
            "WAV data chunk declares {} bytes but only {} are present. "
            "The source file is likely truncated.".format(declared, available)
        )


# ---------------------------------------------------------------------------
# Options and encoding
# ---------------------------------------------------------------------------


class EncodeError(AstCreateError):
    """The requested AST cannot be produced from this source and options."""


class EmptyAudio(EncodeError):
    """There are no samples to encode."""


class ZeroEndSample(EmptyAudio):
    """An end sample / total sample count of zero was requested."""


class ZeroMicrosecondEnd(EmptyAudio):
    """An end time of zero, or one that rounds to zero samples, was requested."""


class ZeroSampleRate(EncodeError):
    """Neither the source nor the override supplies a nonzero sample rate."""


class AudioTooLong(EncodeError):
    """The container size no longer fits the 32-bit header fields."""


class InvalidOutputPath(EncodeError):
    """The output path has no usable file name."""


class OutputCreateFailed(EncodeError):
    """The output file or its directory could not be created or written.

    RULES:
    - path is the output path that failed
    - The original OSError is chained as __cause__
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__("Couldn't create file {}: {}".format(path, reason))


# ---------------------------------------------------------------------------
# Input naming
# ---------------------------------------------------------------------------


class InputPathError(AstCreateError):
    """The input path cannot name a single WAV file."""
