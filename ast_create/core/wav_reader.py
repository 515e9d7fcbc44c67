"""RIFF/WAVE parser producing a validated AudioSource.

WHY: The encoder needs the channel count, sample rate, and raw 16-bit PCM of
the input, and must refuse anything it cannot convert losslessly. WAV files
in the wild carry extra chunks (LIST, bext, cue, ...) in arbitrary order, so
the two chunks that matter have to be located rather than assumed.

HOW: Checks the RIFF/WAVE signature, then scans the sub-chunk list from
offset 12 for 'fmt ', parses it, and scans again from offset 12 for 'data'.
Each scan reads a 4-byte tag and a 4-byte little-endian size and seeks past
chunks it does not want.

RULES:
- The 'fmt ' and 'data' scans are independent; 'data' may precede 'fmt '
- Format tags other than PCM (1) and EXTENSIBLE (0xFFFE) log a warning only
- Channels must be 1-16 and bits per sample exactly 16
- total_samples uses truncating division; a trailing partial frame is dropped
- A data chunk shorter than its declared size raises TruncatedDataChunk
- Only stream positioning is a side effect; the caller owns the stream
"""

from __future__ import annotations

import io
import logging
import struct
from pathlib import Path
from typing import BinaryIO

from ast_create.config import (
    MAX_CHANNELS,
    MIN_CHANNELS,
    PCM_FORMAT_TAGS,
    RIFF_CHUNKS_OFFSET,
    SUPPORTED_BITS_PER_SAMPLE,
)
from ast_create.core.errors import (
    InvalidChannelCount,
    InvalidContainer,
    MissingDataChunk,
    MissingFmtChunk,
    TruncatedDataChunk,
    UnsupportedBitDepth,
)
from ast_create.core.ir import AudioSource

logger = logging.getLogger(__name__)

# Chunk size, format tag, channels, sample rate, byte rate + block align, bits.
_FMT_STRUCT = struct.Struct("<IHHI6xH")


def _find_chunk(stream: BinaryIO, tag: bytes) -> bool:
    """Position ``stream`` just past the tag of the first ``tag`` sub-chunk.

    Starts from the first sub-chunk every time. Returns False when the
    stream ends first.
    """
    stream.seek(RIFF_CHUNKS_OFFSET)
    while True:
        chunk_tag = stream.read(4)
        if len(chunk_tag) < 4:
            return False
        if chunk_tag == tag:
            return True
        size_bytes = stream.read(4)
        if len(size_bytes) < 4:
            return False
        (chunk_size,) = struct.unpack("<I", size_bytes)
        stream.seek(chunk_size, io.SEEK_CUR)


def read_wav(stream: BinaryIO) -> AudioSource:
    """Parse a seekable binary WAV stream into an AudioSource.

    WHY: Every conversion starts here; anything this function accepts must
    be encodable without further format checks.

    HOW: Signature check, 'fmt ' scan and parse, independent 'data' scan,
    then one read of the declared data size.

    RULES:
    - Raises a FormatError subclass for every fatal condition
    - pcm_data is trimmed to whole frames

    Args:
        stream: A binary stream opened for reading, positioned anywhere.

    Returns:
        The validated AudioSource.
    """
    stream.seek(0)
    riff = stream.read(4)
    stream.seek(8)
    wave = stream.read(4)
    if riff != b"RIFF" or wave != b"WAVE":
        raise InvalidContainer(
            "Header contents of WAV are invalid or corrupted. Please be sure "
            "your input file is a RIFF WAV audio file."
        )

    if not _find_chunk(stream, b"fmt "):
        raise MissingFmtChunk(
            "No 'fmt' chunk could be found in WAV file. The source file is "
            "likely corrupted."
        )

    fmt_bytes = stream.read(_FMT_STRUCT.size)
    if len(fmt_bytes) < _FMT_STRUCT.size:
        raise InvalidContainer("The WAV 'fmt' chunk is truncated.")
    _, format_tag, num_channels, sample_rate, bits_per_sample = _FMT_STRUCT.unpack(fmt_bytes)

    if format_tag not in PCM_FORMAT_TAGS:
        logger.warning(
            "Source WAV file may not use PCM (format tag 0x%04X)", format_tag
        )

    if not MIN_CHANNELS <= num_channels <= MAX_CHANNELS:
        raise InvalidChannelCount(num_channels)

    if bits_per_sample != SUPPORTED_BITS_PER_SAMPLE:
        raise UnsupportedBitDepth(bits_per_sample)

    if not _find_chunk(stream, b"data"):
        raise MissingDataChunk(
            "No 'data' chunk could be found in WAV file. Either the source "
            "contains no audio or is corrupted."
        )

    size_bytes = stream.read(4)
    if len(size_bytes) < 4:
        raise MissingDataChunk("The WAV 'data' chunk has no size field.")
    (data_byte_size,) = struct.unpack("<I", size_bytes)

    frame_size = num_channels * 2
    total_samples = data_byte_size // frame_size
    if data_byte_size % frame_size:
        logger.info(
            "Dropping %d trailing byte(s) that do not form a whole frame",
            data_byte_size % frame_size,
        )

    pcm_data = stream.read(data_byte_size)
    if len(pcm_data) < data_byte_size:
        raise TruncatedDataChunk(data_byte_size, len(pcm_data))

    logger.debug(
        "Parsed WAV: %d channel(s), %d Hz, %d samples",
        num_channels, sample_rate, total_samples,
    )

    return AudioSource(
        num_channels=num_channels,
        sample_rate_hz=sample_rate,
        bits_per_sample=bits_per_sample,
        data_byte_size=data_byte_size,
        total_samples=total_samples,
        pcm_data=pcm_data[:total_samples * frame_size],
        format_tag=format_tag,
    )


def load_wav(path: str | Path) -> AudioSource:
    """Open ``path`` and parse it with read_wav()."""
    with open(path, "rb") as f:
        return read_wav(f)
