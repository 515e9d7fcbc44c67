"""Configuration constants, format limits, and .env loading.

WHY: The AST and WAV layouts are full of magic numbers (block size, header
size, codec word, volume marker). Keeping them as plain module-level data
makes them easy to find and keeps them out of the encoding logic. The few
user-tunable defaults are read from the environment so they can be changed
without touching code.

HOW: python-dotenv loads the .env file on import. Constants are defined as
module-level ints, strings and sets. Environment-backed defaults use
os.getenv with a fallback.

RULES:
- Format constants are fixed by the AST container and are never overridden
- Only logging and the default loop state come from the environment
- Extension sets are lowercase and include the leading dot
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# AST container layout
# ---------------------------------------------------------------------------

AST_MAGIC = b"STRM"
BLOCK_MAGIC = b"BLCK"

HEADER_SIZE = 0x40
"""Size of the AST file header in bytes."""

BLOCK_HEADER_SIZE = 0x20
"""Size of each BLCK header (tag, payload size, 24 zero bytes)."""

BLOCK_SIZE_BYTES = 10080
"""Audio bytes per channel in every block except the last."""

ALIGNMENT = 32
"""The last block's per-channel payload is padded to a multiple of this."""

CODEC_INFO = 0x00010010
"""Format 0x0001 (PCM16) and bit depth 16, as one big-endian word at 0x08."""

VOLUME_MARKER = 0x7F

LOOP_ENABLED = 0xFFFF
LOOP_DISABLED = 0x0000

UINT32_MAX = 0xFFFFFFFF

# ---------------------------------------------------------------------------
# WAV input limits
# ---------------------------------------------------------------------------

RIFF_CHUNKS_OFFSET = 12
"""First sub-chunk follows 'RIFF' <size> 'WAVE'."""

PCM_FORMAT_TAGS: set[int] = {0x0001, 0xFFFE}
"""WAVE_FORMAT_PCM and WAVE_FORMAT_EXTENSIBLE."""

MIN_CHANNELS = 1
MAX_CHANNELS = 16
SUPPORTED_BITS_PER_SAMPLE = 16

# ---------------------------------------------------------------------------
# File naming
# ---------------------------------------------------------------------------

SUPPORTED_INPUT_EXTENSIONS: set[str] = {".wav", ".wave"}
OUTPUT_EXTENSION = ".ast"

ILLEGAL_OUTPUT_CHARACTERS = '*?"<>|'
"""Characters rejected in an output path override."""

# ---------------------------------------------------------------------------
# Environment-backed defaults
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("AST_CREATE_LOG_LEVEL", "WARNING").upper()
DEFAULT_LOOPED = os.getenv("AST_CREATE_DEFAULT_LOOPED", "true").lower() == "true"
