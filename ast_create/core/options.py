"""Option directives that turn command-line choices into EncodeOptions.

WHY: Users set loop points and lengths either in samples or in
microseconds, and may repeat or combine flags (``-e 500000 -n -s 1200``).
The result must not depend on anything but the source and the directives
in the order they were given.

HOW: Each directive is a pure function ``(options, source, value) ->
EncodeOptions`` that returns a copy via dataclasses.replace(). DIRECTIVES
maps directive keys to these functions; apply_directives() folds a list of
``(key, value)`` pairs over the defaults.

RULES:
- Microsecond values convert with the source rate, never the custom rate:
  samples = floor(us / 1e6 * rate + 0.5), computed exactly in integers
- End values clamp to the current effective length (never above the source)
- An end of zero samples raises ZeroEndSample / ZeroMicrosecondEnd
- A custom sample rate of zero falls back to the source rate
- An output override with illegal characters is ignored with a warning
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from ast_create.core.errors import ZeroEndSample, ZeroMicrosecondEnd
from ast_create.core.ir import AudioSource, EncodeOptions
from ast_create.core.paths import has_illegal_characters

logger = logging.getLogger(__name__)

DirectiveValue = Union[int, str, None]
Directive = Callable[[EncodeOptions, AudioSource, DirectiveValue], EncodeOptions]

_MICROSECONDS_PER_SECOND = 1_000_000


def microseconds_to_samples(microseconds: int, sample_rate: int) -> int:
    """Convert a time offset to a sample index, rounding half up."""
    return (microseconds * sample_rate + _MICROSECONDS_PER_SECOND // 2) // _MICROSECONDS_PER_SECOND


def effective_total_samples(options: EncodeOptions, source: AudioSource) -> int:
    """Number of samples per channel that will be encoded."""
    if options.loop_end_sample is None:
        return source.total_samples
    return min(options.loop_end_sample, source.total_samples)


def effective_sample_rate(options: EncodeOptions, source: AudioSource) -> int:
    """Sample rate written to the AST header."""
    if options.custom_sample_rate is None:
        return source.sample_rate_hz
    return options.custom_sample_rate


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


def set_output_path(options: EncodeOptions, source: AudioSource, value: DirectiveValue) -> EncodeOptions:
    path = str(value)
    if has_illegal_characters(path):
        logger.warning(
            'Output filename "%s" contains illegal characters. Output argument will be ignored.',
            path,
        )
        return options
    return replace(options, output_path=path)


def set_loop_start(options: EncodeOptions, source: AudioSource, value: DirectiveValue) -> EncodeOptions:
    return replace(options, loop_start_sample=int(value))


def set_loop_start_us(options: EncodeOptions, source: AudioSource, value: DirectiveValue) -> EncodeOptions:
    samples = microseconds_to_samples(int(value), source.sample_rate_hz)
    return replace(options, loop_start_sample=samples)


def disable_loop(options: EncodeOptions, source: AudioSource, value: DirectiveValue = None) -> EncodeOptions:
    return replace(options, looped=False)


def _clamp_end(options: EncodeOptions, source: AudioSource, samples: int) -> EncodeOptions:
    current = effective_total_samples(options, source)
    if samples > current:
        logger.info("End sample %d exceeds the %d available; keeping %d", samples, current, current)
        samples = current
    return replace(options, loop_end_sample=samples)


def set_end_sample(options: EncodeOptions, source: AudioSource, value: DirectiveValue) -> EncodeOptions:
    """Trim the encoded audio to ``value`` samples per channel.

    RULES:
    - Zero raises ZeroEndSample
    - Values past the current length keep the current length (no error)
    """
    samples = int(value)
    if samples == 0:
        raise ZeroEndSample("Total number of samples cannot be zero!")
    return _clamp_end(options, source, samples)


def set_end_us(options: EncodeOptions, source: AudioSource, value: DirectiveValue) -> EncodeOptions:
    """Trim the encoded audio to ``value`` microseconds at the source rate."""
    microseconds = int(value)
    if microseconds == 0:
        raise ZeroMicrosecondEnd("Ending point of AST cannot be set to zero microseconds!")
    samples = microseconds_to_samples(microseconds, source.sample_rate_hz)
    if samples == 0:
        raise ZeroMicrosecondEnd(
            "End point of AST is effectively zero! Please enter a larger value "
            "of microseconds (not milliseconds)."
        )
    return _clamp_end(options, source, samples)


def set_sample_rate(options: EncodeOptions, source: AudioSource, value: DirectiveValue) -> EncodeOptions:
    """Change the playback rate written to the header.

    Loop points already expressed in samples are unaffected; the audio
    simply plays faster or slower.
    """
    rate = int(value)
    if rate == 0:
        rate = source.sample_rate_hz
    return replace(options, custom_sample_rate=rate)


DIRECTIVES: Dict[str, Directive] = {
    "output": set_output_path,
    "loop_start": set_loop_start,
    "loop_start_us": set_loop_start_us,
    "no_loop": disable_loop,
    "end": set_end_sample,
    "end_us": set_end_us,
    "sample_rate": set_sample_rate,
}


def apply_directives(
    source: AudioSource,
    directives: Iterable[Tuple[str, DirectiveValue]],
    options: Optional[EncodeOptions] = None,
) -> EncodeOptions:
    """Fold ``(key, value)`` directives over ``options`` in order.

    Args:
        source: The parsed WAV; needed for microsecond conversion and clamping.
        directives: Pairs whose keys are DIRECTIVES entries.
        options: Starting point; defaults to EncodeOptions().

    Returns:
        The final EncodeOptions.

    Raises:
        KeyError: An unknown directive key.
        EmptyAudio: A zero end sample or end time.
    """
    if options is None:
        options = EncodeOptions()
    for key, value in directives:
        options = DIRECTIVES[key](options, source, value)
    return options
