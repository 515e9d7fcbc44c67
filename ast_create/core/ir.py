"""Immutable records passed between the reader, the directives, and the encoder.

WHY: The conversion used to accumulate state in one object across several
calls, which made the result depend on call order. Three frozen records
make every stage a pure function of its inputs: the parsed source, the
user's choices, and the geometry derived from both.

HOW: Three dataclasses:
  AudioSource   : what the WAV file contains (built once by the reader)
  EncodeOptions : what the user asked for (rebuilt by each directive)
  AstLayout     : header values and block geometry (built once by the encoder)

RULES:
- All three are frozen; use dataclasses.replace() to derive a new one
- pcm_data is raw little-endian, channel-interleaved, whole frames only
- Sample counts are per channel
- EncodeOptions fields left as None mean "use the source's value"
"""

from __future__ import annotations

from dataclasses import dataclass

from ast_create.config import DEFAULT_LOOPED, HEADER_SIZE


@dataclass(frozen=True)
class AudioSource:
    """Validated contents of a 16-bit PCM WAV file.

    RULES:
    - num_channels: 1-16
    - sample_rate_hz: as stored in the fmt chunk (may be 0; rejected at encode)
    - bits_per_sample: always 16
    - data_byte_size: the data chunk's declared size
    - total_samples: data_byte_size // (num_channels * 2)
    - pcm_data: total_samples * num_channels * 2 bytes
    - format_tag: raw fmt tag, kept for diagnostics
    """

    num_channels: int
    sample_rate_hz: int
    bits_per_sample: int
    data_byte_size: int
    total_samples: int
    pcm_data: bytes
    format_tag: int = 0x0001

    @property
    def frame_size(self) -> int:
        """Bytes per sample frame across all channels."""
        return self.num_channels * 2


@dataclass(frozen=True)
class EncodeOptions:
    """User choices for one conversion.

    WHY: Command-line directives override defaults one at a time, in the
    order given. Keeping the result as a value means the encoder sees one
    consistent snapshot.

    RULES:
    - output_path: None until the caller fills in the default name
    - loop_start_sample: may exceed the sample count; corrected at encode
    - loop_end_sample: None means the full source; never above the source
    - custom_sample_rate: None means the source rate
    """

    output_path: str | None = None
    loop_start_sample: int = 0
    loop_end_sample: int | None = None
    looped: bool = DEFAULT_LOOPED
    custom_sample_rate: int | None = None


@dataclass(frozen=True)
class AstLayout:
    """Everything the writer needs, derived once before the first byte.

    WHY: The header repeats values that depend on the block geometry
    (body size, first block size). Computing them in one place keeps the
    header and the block stream consistent.

    RULES:
    - num_blocks >= 1 (an empty source never produces a layout)
    - final_block_payload_bytes is in 1..block_size_bytes
    - padding_bytes is even and in 0..30
    - (final_block_payload_bytes + padding_bytes) % 32 == 0
    - loop_start_sample < total_samples, and 0 when not looped
    """

    num_channels: int
    sample_rate: int
    total_samples: int
    loop_start_sample: int
    looped: bool
    block_size_bytes: int
    num_blocks: int
    final_block_payload_bytes: int
    padding_bytes: int
    ast_body_size: int

    @property
    def loop_end_sample(self) -> int:
        """The loop always ends at the end of the stream."""
        return self.total_samples

    @property
    def audio_byte_size(self) -> int:
        return self.total_samples * self.num_channels * 2

    @property
    def last_block_size(self) -> int:
        """Per-channel payload size written for the final block."""
        return self.final_block_payload_bytes + self.padding_bytes

    @property
    def first_block_size(self) -> int:
        if self.num_blocks == 1:
            return self.last_block_size
        return self.block_size_bytes

    @property
    def file_size(self) -> int:
        return self.ast_body_size + HEADER_SIZE

    def block_size(self, index: int) -> int:
        """Payload size field of block ``index``, padding included."""
        if index == self.num_blocks - 1:
            return self.last_block_size
        return self.block_size_bytes

    def block_payload(self, index: int) -> int:
        """Audio bytes per channel carried by block ``index``, padding excluded."""
        if index == self.num_blocks - 1:
            return self.final_block_payload_bytes
        return self.block_size_bytes
