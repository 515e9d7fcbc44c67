"""Command-line interface for ASTCreate.

WHY: Users convert one WAV at a time from the terminal, often from batch
scripts, and combine loop and length flags freely. The CLI wires together
input validation, WAV parsing, ordered option directives, layout
validation, and file writing behind a single command.

HOW: argparse parses the input path and the directive flags. Every
directive flag appends ``(key, value)`` to one list so that flags are
applied in the order typed. The pipeline runs synchronously; status
messages and the file summary go to stderr, warnings go through logging.

RULES:
- Positional argument: input WAV path (.wav or .wave)
- Directives: -o, -s, -t, -n, -e, -f, -r, applied left to right
- Sample counts and rates are unsigned 32-bit; microseconds are non-negative
- Exit code 0 on success, 1 on any usage, validation, or I/O failure
- Status output goes to stderr (not stdout)
- Python 3.9 compatible: no match/case, no X | Y unions at runtime
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from ast_create import __version__
from ast_create.config import LOG_LEVEL, UINT32_MAX
from ast_create.core.errors import AstCreateError
from ast_create.core.ir import AstLayout, EncodeOptions
from ast_create.core.options import apply_directives
from ast_create.core.paths import (
    check_input_path,
    default_output_path,
    finalize_output_path,
)
from ast_create.core.wav_reader import load_wav
from ast_create.encoder import write_ast_file

_EPILOG = """\
usage examples:
  ast-create inputfile.wav -o outputfile.ast -s 158462 -e 7485124
  ast-create "use quotations if filename contains spaces.wav" -n -f 95000000

Only WAV files (.wav) encoded with 16-bit PCM are supported. Convert other
sources to WAV first.
"""

_CHANNEL_LABELS = {1: " (mono)", 2: " (stereo)"}


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _uint32(text: str) -> int:
    """argparse type for unsigned 32-bit values."""
    try:
        value = int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError("'{}' is not a whole number".format(text))
    if not 0 <= value <= UINT32_MAX:
        raise argparse.ArgumentTypeError(
            "'{}' is outside 0..{}".format(text, UINT32_MAX)
        )
    return value


def _microseconds(text: str) -> int:
    """argparse type for microsecond values."""
    try:
        value = int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError("'{}' is not a whole number".format(text))
    if value < 0:
        raise argparse.ArgumentTypeError("'{}' must not be negative".format(text))
    return value


class _DirectiveAction(argparse.Action):
    """Record ``(dest, value)`` in ``namespace.directives`` in command-line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        directives = list(getattr(namespace, "directives", None) or [])
        directives.append((self.dest, values))
        namespace.directives = directives


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, "{}: error: {}\n".format(self.prog, message))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable, since tests can inspect the parser without running the pipeline.

    RULES:
    - Directive flags use _DirectiveAction and SUPPRESS defaults so only
      ``directives`` ends up on the namespace
    - -n takes no value
    """
    parser = _ArgumentParser(
        prog="ast-create",
        description="Convert a 16-bit PCM WAV file into a lossless Nintendo AST "
                    "stream (Super Mario Galaxy, Mario Kart: Double Dash!!, ...).",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.set_defaults(directives=None)

    parser.add_argument(
        "input_file",
        help="Path to the WAV file to convert.",
    )

    parser.add_argument(
        "-o", "--output",
        dest="output",
        action=_DirectiveAction,
        default=argparse.SUPPRESS,
        metavar="PATH",
        help="Output file (default: same as input with the extension replaced by .ast).",
    )

    parser.add_argument(
        "-s", "--loop-start",
        dest="loop_start",
        action=_DirectiveAction,
        default=argparse.SUPPRESS,
        type=_uint32,
        metavar="SAMPLE",
        help="Loop start sample (default: 0).",
    )

    parser.add_argument(
        "-t", "--loop-start-us",
        dest="loop_start_us",
        action=_DirectiveAction,
        default=argparse.SUPPRESS,
        type=_microseconds,
        metavar="MICROSECONDS",
        help="Loop start in microseconds (30000000 is 30 seconds, or 960000 "
             "samples at 32000 Hz).",
    )

    parser.add_argument(
        "-n", "--no-loop",
        dest="no_loop",
        action=_DirectiveAction,
        default=argparse.SUPPRESS,
        nargs=0,
        help="Disable looping.",
    )

    parser.add_argument(
        "-e", "--end",
        dest="end",
        action=_DirectiveAction,
        default=argparse.SUPPRESS,
        type=_uint32,
        metavar="SAMPLES",
        help="Loop end sample / total samples (default: number of samples in source file).",
    )

    parser.add_argument(
        "-f", "--end-us",
        dest="end_us",
        action=_DirectiveAction,
        default=argparse.SUPPRESS,
        type=_microseconds,
        metavar="MICROSECONDS",
        help="Loop end / total time in microseconds.",
    )

    parser.add_argument(
        "-r", "--sample-rate",
        dest="sample_rate",
        action=_DirectiveAction,
        default=argparse.SUPPRESS,
        type=_uint32,
        metavar="HZ",
        help="Sample rate written to the header (default: same as source). "
             "Changes playback speed, not size.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def _print_summary(layout: AstLayout) -> None:
    """Show the values that end up in the AST header."""
    _status("File opened successfully!")
    _status("")
    _status("\tAST file size: {} bytes".format(layout.file_size))
    _status("\tSample rate: {} Hz".format(layout.sample_rate))
    _status("\tIs looped: {}".format("true" if layout.looped else "false"))
    if layout.looped:
        _status("\tStarting loop point: {} samples".format(layout.loop_start_sample))
    _status("\tEnd of stream: {} samples".format(layout.total_samples))
    _status("\tNumber of channels: {}{}".format(
        layout.num_channels, _CHANNEL_LABELS.get(layout.num_channels, "")
    ))
    _status("")


def _run(args: argparse.Namespace) -> None:
    """Execute the conversion.

    RULES:
    - Input name checks happen before the file is opened
    - The default output name is the first value of output_path, so a later
      ignored -o keeps it
    - The summary is printed after validation, before the file is created
    """
    input_path = check_input_path(args.input_file)
    source = load_wav(input_path)

    options = apply_directives(
        source,
        args.directives or [],
        EncodeOptions(output_path=default_output_path(input_path)),
    )
    output_path = finalize_output_path(options.output_path)

    def on_layout(layout: AstLayout) -> None:
        _print_summary(layout)
        _status("Writing {}...".format(output_path))

    write_ast_file(source, options, output_path, on_layout=on_layout)
    _status("...DONE!")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Returns normally on success; exits with status 1 on failure
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        _run(args)
    except AstCreateError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(
            "Error: Cannot find/open input file {}: {}".format(
                args.input_file, e.strerror or e
            ),
            file=sys.stderr,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
