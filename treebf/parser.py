from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterator, List, Sequence, Tuple

from .lexer import Symbol, scan


class ParseError(Exception):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


# === Instruction Tree ===


class Instruction:
    symbol: ClassVar[Symbol]


@dataclass
class IncrementPointer(Instruction):
    symbol = Symbol.INCREMENT_POINTER


@dataclass
class DecrementPointer(Instruction):
    symbol = Symbol.DECREMENT_POINTER


@dataclass
class Increment(Instruction):
    symbol = Symbol.INCREMENT


@dataclass
class Decrement(Instruction):
    symbol = Symbol.DECREMENT


@dataclass
class Output(Instruction):
    symbol = Symbol.OUTPUT


@dataclass
class Input(Instruction):
    symbol = Symbol.INPUT


@dataclass
class Loop(Instruction):
    symbol = Symbol.LOOP_OPEN
    body: List[Instruction] = field(default_factory=list)


_LEAVES: Dict[Symbol, type] = {
    Symbol.INCREMENT_POINTER: IncrementPointer,
    Symbol.DECREMENT_POINTER: DecrementPointer,
    Symbol.INCREMENT: Increment,
    Symbol.DECREMENT: Decrement,
    Symbol.OUTPUT: Output,
    Symbol.INPUT: Input,
}


def parse(symbols: Sequence[Symbol]) -> List[Instruction]:
    """Build the instruction tree.

    Each matched ``[`` ... ``]`` span becomes a single :class:`Loop` whose body
    holds the instructions of that span. Open loops are kept on an explicit
    stack, so nesting depth is bounded by memory rather than the call stack.
    Error positions are indexes into ``symbols``; an unclosed loop is
    reported at the outermost open ``[``.
    """
    instructions: List[Instruction] = []
    # (position of '[', instruction list the finished loop is appended to)
    open_loops: List[Tuple[int, List[Instruction]]] = []
    current = instructions

    for index, symbol in enumerate(symbols):
        if symbol is Symbol.LOOP_OPEN:
            open_loops.append((index, current))
            current = []
        elif symbol is Symbol.LOOP_CLOSE:
            if not open_loops:
                raise ParseError(f"Unmatched ']' at position {index}", index)
            _, parent = open_loops.pop()
            parent.append(Loop(current))
            current = parent
        else:
            current.append(_LEAVES[symbol]())

    if open_loops:
        loop_start = open_loops[0][0]
        raise ParseError(f"Unmatched '[' at position {loop_start}", loop_start)

    return instructions


def parse_source(source: str) -> List[Instruction]:
    return parse(scan(source))


def unparse(instructions: Sequence[Instruction]) -> str:
    """Flatten a tree back into comment-free program text."""
    parts: List[str] = []
    pending: List[Iterator[Instruction]] = [iter(instructions)]
    while pending:
        instruction = next(pending[-1], None)
        if instruction is None:
            pending.pop()
            if pending:
                parts.append(Symbol.LOOP_CLOSE.value)
        elif isinstance(instruction, Loop):
            parts.append(Symbol.LOOP_OPEN.value)
            pending.append(iter(instruction.body))
        else:
            parts.append(instruction.symbol.value)
    return "".join(parts)


def count_instructions(instructions: Sequence[Instruction]) -> int:
    total = 0
    pending: List[Sequence[Instruction]] = [instructions]
    while pending:
        for instruction in pending.pop():
            if isinstance(instruction, Loop):
                pending.append(instruction.body)
            else:
                total += 1
    return total


__all__ = [
    "Decrement",
    "Increment",
    "IncrementPointer",
    "DecrementPointer",
    "Input",
    "Instruction",
    "Loop",
    "Output",
    "ParseError",
    "count_instructions",
    "parse",
    "parse_source",
    "unparse",
]
