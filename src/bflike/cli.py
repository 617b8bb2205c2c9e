from __future__ import annotations

import argparse
import logging
import sys

from typing import List, Optional

from .api import get_parser, parse_memory_size
from .debugger import format_snapshot, trace
from .errors import BFParseError, BFRuntimeError
from .runtime import Runner

logger = logging.getLogger(__name__)


def _read_source(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bflike",
        description="Run a Brainfuck-family program.",
    )
    parser.add_argument("file", help="program source file, or - for stdin")
    parser.add_argument("--language", "-l", default="bf", help="bf (default) or ook")
    parser.add_argument("--memory", "-m", default="30000", help="N, fixed:N, right or both (default 30000)")
    parser.add_argument("--input", "-i", dest="input_file", help="read program input from this file instead of stdin")
    parser.add_argument("--trace", action="store_true", help="print interpreter state to stderr before every step")
    parser.add_argument("--max-steps", type=int, default=None, help="stop tracing after this many steps")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        memsize = parse_memory_size(args.memory)
        lang_parser = get_parser(args.language)
    except ValueError as e:
        parser.error(str(e))

    if args.file == '-' and args.input_file is None:
        parser.error("program input must come from --input when the source is read from stdin")

    try:
        source = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Couldn't read {args.file}: {e}", file=sys.stderr)
        return 1

    try:
        program = lang_parser.parse_str(source)
    except BFParseError as e:
        print(e.describe(source), file=sys.stderr)
        return 1

    output = sys.stdout.buffer
    if args.input_file:
        try:
            input_stream = open(args.input_file, 'rb')
        except OSError as e:
            print(f"Couldn't read {args.input_file}: {e}", file=sys.stderr)
            return 1
    else:
        input_stream = sys.stdin.buffer
    try:
        if args.trace:
            runner = trace(
                program,
                input_stream,
                output,
                lambda snap: print(format_snapshot(snap), file=sys.stderr),
                memsize=memsize,
                max_steps=args.max_steps,
            )
            if runner.is_running():
                logger.warning("stopped after %d steps", runner.step_count)
        else:
            Runner(program, input_stream, output, memsize).run()
    except BFRuntimeError as e:
        output.flush()
        print(f"\nRuntimeError: {e}", file=sys.stderr)
        return 1
    finally:
        if args.input_file:
            input_stream.close()

    output.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
