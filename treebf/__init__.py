from .interpreter import (
    BrainfuckInterpreter,
    ExecutionError,
    InputExhausted,
    StepLimitExceeded,
    TapeBoundsError,
)
from .lexer import Symbol, scan
from .parser import Instruction, Loop, ParseError, parse, parse_source, unparse

__all__ = [
    "BrainfuckInterpreter",
    "ExecutionError",
    "InputExhausted",
    "Instruction",
    "Loop",
    "ParseError",
    "StepLimitExceeded",
    "Symbol",
    "TapeBoundsError",
    "parse",
    "parse_source",
    "scan",
    "unparse",
]
