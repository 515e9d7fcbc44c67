"""Unit tests for option directives.

WHY: Loop points and lengths are where user intent meets sample math.
Off-by-one rounding or using the wrong sample rate shifts the loop audibly,
and an unclamped end would ask the encoder for samples that do not exist.

HOW: Directives are applied to conftest-built AudioSource records through
apply_directives(), the same path the CLI uses.

RULES:
- Microsecond conversions always use the source rate
- Directive order is significant and tested explicitly
"""

import logging

import pytest

from ast_create.core.errors import EmptyAudio, ZeroEndSample, ZeroMicrosecondEnd
from ast_create.core.ir import EncodeOptions
from ast_create.core.options import (
    DIRECTIVES,
    apply_directives,
    effective_sample_rate,
    effective_total_samples,
    microseconds_to_samples,
)


class TestMicrosecondConversion:
    """samples = floor(us / 1e6 * rate + 0.5)."""

    def test_thirty_seconds_at_32k(self):
        assert microseconds_to_samples(30_000_000, 32000) == 960000

    def test_rounds_half_up(self):
        assert microseconds_to_samples(500_000, 1) == 1
        assert microseconds_to_samples(499_999, 1) == 0

    def test_fractional_sample(self):
        # 1 ms at 44100 Hz is 44.1 samples
        assert microseconds_to_samples(1000, 44100) == 44
        # 1.5 ms at 44100 Hz is 66.15 samples
        assert microseconds_to_samples(1500, 44100) == 66


class TestDefaults:

    def test_no_directives(self, mono_source):
        options = apply_directives(mono_source, [])
        assert options == EncodeOptions()
        assert options.looped is True
        assert effective_total_samples(options, mono_source) == 64000
        assert effective_sample_rate(options, mono_source) == 32000

    def test_starting_options_are_kept(self, mono_source):
        start = EncodeOptions(output_path="theme.ast")
        options = apply_directives(mono_source, [("loop_start", 10)], start)
        assert options.output_path == "theme.ast"
        assert options.loop_start_sample == 10
        assert start.loop_start_sample == 0


class TestLoopStart:

    def test_in_samples(self, mono_source):
        options = apply_directives(mono_source, [("loop_start", 158462)])
        assert options.loop_start_sample == 158462

    def test_in_microseconds(self, mono_source):
        options = apply_directives(mono_source, [("loop_start_us", 1_250_000)])
        assert options.loop_start_sample == 40000

    def test_microseconds_ignore_custom_rate(self, mono_source):
        options = apply_directives(
            mono_source,
            [("sample_rate", 16000), ("loop_start_us", 1_000_000)],
        )
        assert options.custom_sample_rate == 16000
        assert options.loop_start_sample == 32000

    def test_later_directive_wins(self, mono_source):
        options = apply_directives(
            mono_source, [("loop_start", 5), ("loop_start_us", 1000)]
        )
        assert options.loop_start_sample == 32


class TestEnd:

    def test_trims(self, mono_source):
        options = apply_directives(mono_source, [("end", 1000)])
        assert options.loop_end_sample == 1000
        assert effective_total_samples(options, mono_source) == 1000

    def test_clamps_to_source_length(self, mono_source):
        options = apply_directives(mono_source, [("end", 7485124)])
        assert options.loop_end_sample == 64000

    def test_clamps_to_current_length(self, mono_source):
        options = apply_directives(mono_source, [("end", 100), ("end", 200)])
        assert options.loop_end_sample == 100

    def test_zero_end_sample(self, mono_source):
        with pytest.raises(ZeroEndSample):
            apply_directives(mono_source, [("end", 0)])

    def test_zero_end_is_empty_audio(self, mono_source):
        with pytest.raises(EmptyAudio):
            apply_directives(mono_source, [("end", 0)])

    def test_in_microseconds(self, mono_source):
        options = apply_directives(mono_source, [("end_us", 1_000_000)])
        assert options.loop_end_sample == 32000

    def test_microseconds_clamp(self, mono_source):
        options = apply_directives(mono_source, [("end_us", 95_000_000)])
        assert options.loop_end_sample == 64000

    def test_zero_microseconds(self, mono_source):
        with pytest.raises(ZeroMicrosecondEnd):
            apply_directives(mono_source, [("end_us", 0)])

    def test_microseconds_rounding_to_zero(self, mono_source):
        # 10 us at 32000 Hz is 0.32 samples
        with pytest.raises(ZeroMicrosecondEnd):
            apply_directives(mono_source, [("end_us", 10)])


class TestLoopAndRate:

    def test_no_loop(self, mono_source):
        options = apply_directives(mono_source, [("loop_start", 100), ("no_loop", [])])
        assert options.looped is False
        # The loop start is forced to 0 by the encoder, not here
        assert options.loop_start_sample == 100

    def test_custom_rate(self, mono_source):
        options = apply_directives(mono_source, [("sample_rate", 48000)])
        assert effective_sample_rate(options, mono_source) == 48000

    def test_zero_rate_falls_back_to_source(self, mono_source):
        options = apply_directives(mono_source, [("sample_rate", 0)])
        assert options.custom_sample_rate == 32000


class TestOutputPath:

    def test_sets_path(self, mono_source):
        options = apply_directives(mono_source, [("output", "out/theme.ast")])
        assert options.output_path == "out/theme.ast"

    def test_illegal_path_is_ignored(self, mono_source, caplog):
        start = EncodeOptions(output_path="theme.ast")
        with caplog.at_level(logging.WARNING, logger="ast_create.core.options"):
            options = apply_directives(mono_source, [("output", "what?.ast")], start)
        assert options.output_path == "theme.ast"
        assert "illegal characters" in caplog.text


class TestRegistry:

    def test_known_keys(self):
        assert set(DIRECTIVES) == {
            "output", "loop_start", "loop_start_us", "no_loop",
            "end", "end_us", "sample_rate",
        }

    def test_unknown_key(self, mono_source):
        with pytest.raises(KeyError):
            apply_directives(mono_source, [("volume", 100)])
