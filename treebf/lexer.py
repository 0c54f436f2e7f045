from __future__ import annotations

from enum import Enum
from typing import List


class Symbol(str, Enum):
    INCREMENT_POINTER = ">"
    DECREMENT_POINTER = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    LOOP_OPEN = "["
    LOOP_CLOSE = "]"


_SYMBOLS = {symbol.value: symbol for symbol in Symbol}


def scan(source: str) -> List[Symbol]:
    """Turn source text into symbols. Every other character is a comment."""
    symbols: List[Symbol] = []
    for char in source:
        symbol = _SYMBOLS.get(char)
        if symbol is not None:
            symbols.append(symbol)
    return symbols


__all__ = ["Symbol", "scan"]
