"""
Check annotation occurrence found inside a text blob.

An occurrence is the ``@Check[...]`` tag decomposed around its ``dc:`` key:
everything before the key is the prefix, everything after the digits is the
suffix.  Both are kept verbatim so the tag round-trips unchanged apart from
the number.
"""
from __future__ import annotations

from dataclasses import dataclass

CHECK_OPEN = "@Check["
CHECK_CLOSE = "]"
DC_KEY = "dc:"


@dataclass(frozen=True)
class CheckOccurrence:
    """A single ``@Check[...dc:N...]`` tag with its position in the scanned text."""

    prefix: str
    """Tag parameters before the ``dc:`` key (e.g. ``'type:fortitude|'``)."""

    value: int
    """The DC as written in the text."""

    suffix: str
    """Tag parameters after the DC digits (e.g. ``'|basic'``)."""

    start: int = 0
    """Inclusive start offset of the whole tag in the scanned text."""

    end: int = 0
    """Exclusive end offset of the whole tag in the scanned text."""

    def render(self, value: int) -> str:
        """Rebuild the tag text carrying *value* as its DC."""
        return f"{CHECK_OPEN}{self.prefix}{DC_KEY}{value}{self.suffix}{CHECK_CLOSE}"

    def span_length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {
            "prefix": self.prefix,
            "dc": self.value,
            "suffix": self.suffix,
            "span": {"start": self.start, "end": self.end},
        }

    def __repr__(self) -> str:
        return (
            f"CheckOccurrence({self.prefix!r}, dc={self.value}, {self.suffix!r},"
            f" [{self.start},{self.end}])"
        )
