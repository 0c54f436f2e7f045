from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import BinaryIO, Iterator, NoReturn, Optional

from .interpreter import BrainfuckInterpreter, ExecutionError
from .parser import ParseError, parse_source


class _UsageParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise SystemExit(1)


def _read_source(path: str) -> str:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_path.read_text(encoding="utf-8")


def _read_stdin_bytes(stream: Optional[BinaryIO] = None) -> Iterator[int]:
    source = stream if stream is not None else sys.stdin.buffer
    while True:
        chunk = source.read(1)
        if not chunk:
            return
        yield chunk[0]


def main(argv: Optional[list[str]] = None) -> int:
    parser = _UsageParser(prog="treebf", description="Tree-walking Brainfuck interpreter", add_help=False)
    parser.add_argument("source", help="Path to Brainfuck source file")
    args = parser.parse_args(argv)

    try:
        source_text = _read_source(args.source)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Failed to read source: {exc}", file=sys.stderr)
        return 1

    try:
        instructions = parse_source(source_text)
    except ParseError as exc:
        print(f"Parse error: {exc}", file=sys.stderr)
        return 1

    interpreter = BrainfuckInterpreter(output_stream=sys.stdout.buffer)
    try:
        interpreter.execute(instructions, input_data=_read_stdin_bytes())
    except ExecutionError as exc:
        sys.stdout.buffer.flush()
        print(f"Runtime error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
