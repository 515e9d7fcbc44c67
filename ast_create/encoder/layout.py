"""Block geometry and header values for one AST file.

WHY: The AST header repeats values that only exist once the block split is
known (body size, first block size), and the writer must agree with it byte
for byte. Deriving every number once, before the output file is opened,
also lets every validation failure happen before anything is written.

HOW: build_layout() resolves the effective sample count and rate from the
source and options, checks them in a fixed order, applies the loop start
corrections, and computes the block split.

RULES:
- Checks run in order: EmptyAudio, ZeroSampleRate, then corrections
- loop_start >= total_samples is reset to 0 silently (not an error)
- looped == False forces loop_start to 0
- num_blocks = ceil(total_samples * 2 / 10080)
- final block payload = (total_samples * 2) % 10080, or 10080 if that is 0
- padding = (32 - final % 32) % 32, appended per channel
- body size = audio bytes + 32 per block header + padding per channel
- A body size beyond 32 bits raises AudioTooLong
"""

from __future__ import annotations

import logging

from ast_create.config import (
    ALIGNMENT,
    BLOCK_HEADER_SIZE,
    BLOCK_SIZE_BYTES,
    UINT32_MAX,
)
from ast_create.core.errors import AudioTooLong, EmptyAudio, ZeroSampleRate
from ast_create.core.ir import AstLayout, AudioSource, EncodeOptions
from ast_create.core.options import effective_sample_rate, effective_total_samples

logger = logging.getLogger(__name__)


def block_geometry(total_samples: int, block_size: int = BLOCK_SIZE_BYTES):
    """Return ``(num_blocks, final_block_payload_bytes, padding_bytes)``.

    Sizes are per channel. With no samples the block count is 0.
    """
    channel_bytes = total_samples * 2
    num_blocks, remainder = divmod(channel_bytes, block_size)
    if remainder:
        num_blocks += 1
    final_payload = remainder or block_size
    padding = (ALIGNMENT - final_payload % ALIGNMENT) % ALIGNMENT
    return num_blocks, final_payload, padding


def build_layout(source: AudioSource, options: EncodeOptions) -> AstLayout:
    """Validate ``options`` against ``source`` and derive the AstLayout.

    Args:
        source: The parsed WAV.
        options: Final options after all directives.

    Returns:
        The layout the writer will follow.

    Raises:
        EmptyAudio: No samples to encode.
        ZeroSampleRate: Effective sample rate is 0.
        AudioTooLong: The container would overflow its 32-bit size field.
    """
    total_samples = effective_total_samples(options, source)
    num_blocks, final_payload, padding = block_geometry(total_samples)

    if num_blocks == 0:
        raise EmptyAudio("Source WAV contains no audio data!")

    sample_rate = effective_sample_rate(options, source)
    if sample_rate == 0:
        raise ZeroSampleRate("Source file has a sample rate of 0 Hz!")

    loop_start = options.loop_start_sample
    if loop_start >= total_samples:
        logger.info(
            "Loop start %d is not before the end (%d samples); using 0",
            loop_start, total_samples,
        )
        loop_start = 0
    if not options.looped:
        loop_start = 0

    ast_body_size = (
        total_samples * source.frame_size
        + num_blocks * BLOCK_HEADER_SIZE
        + padding * source.num_channels
    )
    if ast_body_size > UINT32_MAX:
        raise AudioTooLong(
            "The resulting AST would be {} bytes, more than the format can "
            "describe.".format(ast_body_size)
        )

    return AstLayout(
        num_channels=source.num_channels,
        sample_rate=sample_rate,
        total_samples=total_samples,
        loop_start_sample=loop_start,
        looped=options.looped,
        block_size_bytes=BLOCK_SIZE_BYTES,
        num_blocks=num_blocks,
        final_block_payload_bytes=final_payload,
        padding_bytes=padding,
        ast_body_size=ast_body_size,
    )
