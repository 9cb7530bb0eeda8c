"""
Sequential record identifiers.

Identifiers are a fixed prefix followed by a zero-padded integer, e.g. `ST-001`.
The next identifier is derived purely from the identifiers already in the
collection, so deleting and re-adding records never needs a stored counter.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional


class IdentifierGenerator:
    """
    Produce `prefix + zero-padded number` identifiers.

    Parameters
    ----------
    prefix : str
        Literal text in front of the number.
    width : int
        Minimum number of digits; larger numbers simply grow wider.
    """

    def __init__(self, prefix: str = "ST-", width: int = 3) -> None:
        if width < 1:
            raise ValueError("width must be at least 1")
        self.prefix = prefix
        self.width = width
        self._pattern = re.compile(re.escape(prefix) + r"([0-9]+)")

    def format(self, number: int) -> str:
        return f"{self.prefix}{number:0{self.width}d}"

    def first(self) -> str:
        return self.format(1)

    def parse(self, identifier: str) -> Optional[int]:
        """Numeric suffix of `identifier`, or None if it does not follow the pattern."""
        match = self._pattern.fullmatch(identifier)
        if match is None:
            return None
        return int(match.group(1))

    def next(self, existing: Iterable[str]) -> str:
        """Identifier following the highest recognised one in `existing`."""
        numbers = [n for n in (self.parse(i) for i in existing) if n is not None]
        if not numbers:
            return self.first()
        return self.format(max(numbers) + 1)


__all__ = ["IdentifierGenerator"]
