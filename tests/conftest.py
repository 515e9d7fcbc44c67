"""Shared test fixtures and WAV builders for the ast_create test suite.

WHY: Reader, encoder, and CLI tests all need WAV files with controlled
contents: unusual chunk orders, bad headers and exact sample values. Building
them byte by byte here keeps every test independent of external assets.

HOW: Small builder functions assemble RIFF chunks with struct; fixtures
provide ready-made AudioSource records and WAV files under tmp_path.

RULES:
- Sample values are deterministic so encoded bytes can be checked exactly
- The mono fixture matches the 32000 Hz / 64000-sample reference scenario
"""

import struct
from typing import List, Optional, Sequence

import pytest

from ast_create.core.ir import AudioSource


# ---------------------------------------------------------------------------
# Byte builders
# ---------------------------------------------------------------------------


def pcm16(values: Sequence[int]) -> bytes:
    """Pack signed 16-bit samples little-endian."""
    return struct.pack("<{}h".format(len(values)), *values)


def ramp(count: int, step: int = 37) -> List[int]:
    """Deterministic signed 16-bit sample values."""
    return [((i * step) % 65536) - 32768 for i in range(count)]


def interleave(*channels: Sequence[int]) -> List[int]:
    return [sample for frame in zip(*channels) for sample in frame]


def chunk(tag: bytes, payload: bytes) -> bytes:
    return tag + struct.pack("<I", len(payload)) + payload


def fmt_chunk(
    num_channels: int = 1,
    sample_rate: int = 32000,
    bits_per_sample: int = 16,
    format_tag: int = 1,
) -> bytes:
    block_align = num_channels * bits_per_sample // 8
    payload = struct.pack(
        "<HHIIHH",
        format_tag,
        num_channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        bits_per_sample,
    )
    return chunk(b"fmt ", payload)


def data_chunk(pcm: bytes, declared_size: Optional[int] = None) -> bytes:
    size = len(pcm) if declared_size is None else declared_size
    return b"data" + struct.pack("<I", size) + pcm


def riff(*chunks: bytes) -> bytes:
    body = b"WAVE" + b"".join(chunks)
    return b"RIFF" + struct.pack("<I", len(body)) + body


def make_wav(
    pcm: bytes,
    num_channels: int = 1,
    sample_rate: int = 32000,
    bits_per_sample: int = 16,
    format_tag: int = 1,
) -> bytes:
    return riff(
        fmt_chunk(num_channels, sample_rate, bits_per_sample, format_tag),
        data_chunk(pcm),
    )


def make_source(
    samples: Sequence[int],
    num_channels: int = 1,
    sample_rate: int = 32000,
) -> AudioSource:
    """AudioSource for interleaved ``samples`` without going through a file."""
    pcm = pcm16(samples)
    return AudioSource(
        num_channels=num_channels,
        sample_rate_hz=sample_rate,
        bits_per_sample=16,
        data_byte_size=len(pcm),
        total_samples=len(samples) // num_channels,
        pcm_data=pcm,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mono_samples():
    """64000 mono samples at 32000 Hz (two seconds)."""
    return ramp(64000)


@pytest.fixture
def mono_source(mono_samples):
    return make_source(mono_samples)


@pytest.fixture
def stereo_channels():
    """6000 frames: left ramps up, right is its negation minus one."""
    left = ramp(6000, step=11)
    right = [-v - 1 for v in left]
    return left, right


@pytest.fixture
def stereo_source(stereo_channels):
    left, right = stereo_channels
    return make_source(interleave(left, right), num_channels=2, sample_rate=44100)


@pytest.fixture
def mono_wav_file(tmp_path, mono_samples):
    path = tmp_path / "theme.wav"
    path.write_bytes(make_wav(pcm16(mono_samples)))
    return path
