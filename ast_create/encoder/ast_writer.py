"""AST container writer: 64-byte STRM header followed by BLCK blocks.

WHY: AST stores 16-bit PCM big-endian and channel-planar within each
block, while WAV stores it little-endian and interleaved. Players read the
header fields literally, so every size must match the bytes that follow.

HOW: build_layout() fixes all numbers first. The header is one struct.pack
call. Each block is a 32-byte BLCK header followed by the block's samples:
a numpy view of the interleaved little-endian frames is transposed into a
reusable big-endian (channels x samples) scratch array, and each channel's
row is written out in turn. The final block's rows are each followed by
the zero padding.

RULES:
- All multi-byte header fields are big-endian, including the loop flag
- Header: magic, body size, codec, channels, loop flag, rate, total samples,
  loop start, loop end (= total), first block size, 0, volume 0x7F, 20 zeros
- Block payload field: 10080, or final payload + padding on the last block
- Padding bytes follow every channel of the last block, not the block
- One scratch buffer per encode call, sized to a full block
- write_ast_file() validates before touching the filesystem and never
  leaves a partial file behind
"""

from __future__ import annotations

import io
import logging
import struct
from pathlib import Path
from typing import BinaryIO, Callable, Optional

import numpy as np

from ast_create.config import (
    AST_MAGIC,
    BLOCK_MAGIC,
    CODEC_INFO,
    LOOP_DISABLED,
    LOOP_ENABLED,
    VOLUME_MARKER,
)
from ast_create.core.errors import OutputCreateFailed
from ast_create.core.ir import AstLayout, AudioSource, EncodeOptions
from ast_create.encoder.layout import build_layout

logger = logging.getLogger(__name__)

# magic, body size, codec, channels, loop flag, sample rate, total samples,
# loop start, loop end, first block size, reserved, volume, 20 reserved bytes
_HEADER_STRUCT = struct.Struct(">4sIIHHIIIIIII20x")

# magic, payload size per channel, 24 reserved bytes
_BLOCK_HEADER_STRUCT = struct.Struct(">4sI24x")


def pack_header(layout: AstLayout) -> bytes:
    """Serialize the 64-byte AST header for ``layout``."""
    return _HEADER_STRUCT.pack(
        AST_MAGIC,
        layout.ast_body_size,
        CODEC_INFO,
        layout.num_channels,
        LOOP_ENABLED if layout.looped else LOOP_DISABLED,
        layout.sample_rate,
        layout.total_samples,
        layout.loop_start_sample,
        layout.loop_end_sample,
        layout.first_block_size,
        0,
        VOLUME_MARKER,
    )


def pack_block_header(block_size: int) -> bytes:
    return _BLOCK_HEADER_STRUCT.pack(BLOCK_MAGIC, block_size)


class PlanarBlockBuffer:
    """Scratch space that turns interleaved LE frames into big-endian channel rows.

    WHY: Every block needs the same transform. Allocating one array for the
    whole encode keeps the per-block work to a copy.

    RULES:
    - Capacity is one full block per channel
    - load() overwrites only the first ``num_frames`` columns
    """

    def __init__(self, num_channels: int, block_size_bytes: int) -> None:
        self.num_channels = num_channels
        self._planar = np.zeros((num_channels, block_size_bytes // 2), dtype=">i2")

    def load(self, interleaved: memoryview, num_frames: int) -> None:
        frames = np.frombuffer(interleaved, dtype="<i2", count=num_frames * self.num_channels)
        # Assigning across dtypes converts each sample to big-endian
        self._planar[:, :num_frames] = frames.reshape(num_frames, self.num_channels).T

    def channel_bytes(self, channel: int, num_frames: int) -> bytes:
        return self._planar[channel, :num_frames].tobytes()


def _write_blocks(pcm_data: bytes, layout: AstLayout, stream: BinaryIO) -> None:
    buffer = PlanarBlockBuffer(layout.num_channels, layout.block_size_bytes)
    pcm = memoryview(pcm_data)
    padding = b"\x00" * layout.padding_bytes
    last_index = layout.num_blocks - 1
    offset = 0

    for index in range(layout.num_blocks):
        payload = layout.block_payload(index)
        num_frames = payload // 2
        chunk_size = payload * layout.num_channels

        stream.write(pack_block_header(layout.block_size(index)))
        buffer.load(pcm[offset:offset + chunk_size], num_frames)
        offset += chunk_size

        for channel in range(layout.num_channels):
            stream.write(buffer.channel_bytes(channel, num_frames))
            if index == last_index:
                stream.write(padding)


def _emit(source: AudioSource, layout: AstLayout, stream: BinaryIO) -> None:
    stream.write(pack_header(layout))
    _write_blocks(source.pcm_data, layout, stream)


def write_ast(source: AudioSource, options: EncodeOptions, stream: BinaryIO) -> AstLayout:
    """Encode ``source`` into ``stream`` and return the layout used.

    Raises:
        EncodeError: From build_layout(), before anything is written.
    """
    layout = build_layout(source, options)
    _emit(source, layout, stream)
    return layout


def encode_ast(source: AudioSource, options: EncodeOptions) -> bytes:
    """Encode ``source`` to an in-memory AST file."""
    buf = io.BytesIO()
    write_ast(source, options, buf)
    return buf.getvalue()


def write_ast_file(
    source: AudioSource,
    options: EncodeOptions,
    path: str | Path,
    on_layout: Optional[Callable[[AstLayout], None]] = None,
) -> AstLayout:
    """Encode ``source`` to ``path``, creating parent directories.

    WHY: The CLI's output step. Validation must finish before the file is
    created so a rejected conversion leaves nothing on disk.

    HOW: Builds the layout, creates the parent directory, then writes the
    header and blocks inside a ``with`` block. On any failure after the
    file was opened, the partial file is removed.

    RULES:
    - OSError (directory, open, write) becomes OutputCreateFailed
    - Other exceptions propagate unchanged after cleanup

    Args:
        source: The parsed WAV.
        options: Final options after all directives.
        path: Output file path.
        on_layout: Optional callback, called with the validated layout
                   just before the file is created.

    Returns:
        The AstLayout that was written.
    """
    layout = build_layout(source, options)
    if on_layout is not None:
        on_layout(layout)
    output_path = Path(path)
    opened = False

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            opened = True
            _emit(source, layout, f)
    except OSError as e:
        if opened:
            output_path.unlink(missing_ok=True)
        raise OutputCreateFailed(str(output_path), e.strerror or str(e)) from e
    except BaseException:
        if opened:
            output_path.unlink(missing_ok=True)
        raise

    logger.info(
        "Wrote %s: %d block(s), %d bytes", output_path, layout.num_blocks, layout.file_size
    )
    return layout
