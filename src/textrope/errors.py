from __future__ import annotations


class RopeError(Exception):
    """Base class for everything raised by textrope"""


class OutOfRangeError(RopeError, IndexError):
    """A position or count falls outside the rope it was applied to"""

    def __init__(self, operation: str, detail: str, length: int):
        self.operation: str = operation
        self.length: int = length
        super().__init__(f"{operation}: {detail} (rope length {length})")
