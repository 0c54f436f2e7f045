from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Iterator, List, Optional, Sequence, Tuple

from .lexer import Symbol
from .parser import Instruction, Loop, parse_source

TAPE_LENGTH = 24576
START_POINTER = 12288
CELL_MODULUS = 256


class ExecutionError(RuntimeError):
    """Base class for faults raised while a program is running."""


class TapeBoundsError(ExecutionError):
    pass


class InputExhausted(ExecutionError):
    pass


class StepLimitExceeded(RuntimeError):
    """Raised when Brainfuck execution exceeds the configured step budget."""


@dataclass
class BrainfuckInterpreter:
    """Tree-walking executor.

    With an ``output_stream`` every emitted character is written to it as
    UTF-8 as soon as it is produced and nothing is buffered. Without one,
    output is collected in ``output_buffer`` and returned by :meth:`execute`.
    """

    output_stream: Optional[BinaryIO] = None

    tape: List[int] = field(init=False, repr=False)
    pointer: int = field(init=False, repr=False)
    output_buffer: List[str] = field(init=False, repr=False)
    steps: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.tape = [0] * TAPE_LENGTH
        self.pointer = START_POINTER
        self.output_buffer = []
        self.steps = 0
        self._input: Iterator[int] = iter(())
        self._max_steps: Optional[int] = None

    def run(
        self,
        code: str,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
    ) -> str:
        return self.execute(parse_source(code), input_data=input_data, max_steps=max_steps)

    def execute(
        self,
        instructions: Sequence[Instruction],
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
    ) -> str:
        self.reset()
        self._input = iter(input_data if input_data is not None else ())
        self._max_steps = max_steps
        self._execute_tree(instructions)
        return "".join(self.output_buffer)

    def _execute_tree(self, instructions: Sequence[Instruction]) -> None:
        # Frames of enclosing blocks, each resuming at the loop that was entered.
        frames: List[Tuple[Sequence[Instruction], int]] = []
        block, index = instructions, 0
        while True:
            if index == len(block):
                if not frames:
                    return
                # End of a loop body: go back and test the loop again.
                block, index = frames.pop()
                continue
            instruction = block[index]
            if isinstance(instruction, Loop):
                if self._test_current_cell():
                    frames.append((block, index))
                    block, index = instruction.body, 0
                else:
                    index += 1
            else:
                self._tick()
                self._apply(instruction)
                index += 1

    def _tick(self) -> None:
        if self._max_steps is not None and self.steps >= self._max_steps:
            raise StepLimitExceeded("Brainfuck program exceeded allowed step count")
        self.steps += 1

    def _test_current_cell(self) -> bool:
        self._tick()
        return self.tape[self.pointer] != 0

    def _apply(self, instruction: Instruction) -> None:
        symbol = instruction.symbol
        if symbol is Symbol.INCREMENT_POINTER:
            if self.pointer + 1 >= TAPE_LENGTH:
                raise TapeBoundsError(
                    f"Pointer moved beyond the tape length ({TAPE_LENGTH} cells)."
                )
            self.pointer += 1
        elif symbol is Symbol.DECREMENT_POINTER:
            if self.pointer == 0:
                raise TapeBoundsError("Pointer moved before start of tape.")
            self.pointer -= 1
        elif symbol is Symbol.INCREMENT:
            self.tape[self.pointer] = (self.tape[self.pointer] + 1) % CELL_MODULUS
        elif symbol is Symbol.DECREMENT:
            self.tape[self.pointer] = (self.tape[self.pointer] - 1) % CELL_MODULUS
        elif symbol is Symbol.OUTPUT:
            char = chr(self.tape[self.pointer])
            if self.output_stream is None:
                self.output_buffer.append(char)
            else:
                self.output_stream.write(char.encode("utf-8"))
                self.output_stream.flush()
        elif symbol is Symbol.INPUT:
            try:
                value = next(self._input)
            except StopIteration:
                raise InputExhausted("Input exhausted while reading a byte.") from None
            self.tape[self.pointer] = value % CELL_MODULUS
        else:
            raise ValueError(f"Unexpected instruction: {instruction!r}")


__all__ = [
    "BrainfuckInterpreter",
    "CELL_MODULUS",
    "ExecutionError",
    "InputExhausted",
    "START_POINTER",
    "StepLimitExceeded",
    "TAPE_LENGTH",
    "TapeBoundsError",
]
