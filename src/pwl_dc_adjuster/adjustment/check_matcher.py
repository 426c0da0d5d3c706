"""
Check Matcher — locates ``@Check[...dc:N...]`` tags inside rule text.

Tag form::

    @Check[<prefix>dc:<digits><suffix>]

``prefix`` and ``suffix`` never contain ``]``; the ``dc`` key must start on a
word boundary; the tag and key keywords match case-insensitively.  The first
``dc:`` key of a tag is the one taken.

The scan finds a tag opener, then the next ``]``, then searches for the key
only inside that span.  An opener whose span holds no key is skipped along
with every later opener inside the same span, so each character is examined
a bounded number of times and unclosed openers cannot make the scan
quadratic.  When no ``]`` follows an opener the scan stops: no later opener
can close either.

Every call starts a fresh scan, so no position is shared between calls and
the same text always yields the same occurrences.
"""
from __future__ import annotations

import re
from typing import Iterator, List, Optional

from pwl_dc_adjuster.models.annotation import CHECK_CLOSE, CheckOccurrence

OPEN_PATTERN = re.compile(r"@Check\[", re.IGNORECASE)
KEY_PATTERN = re.compile(r"\bdc:(\d+)", re.IGNORECASE)


def find_checks(text: Optional[str]) -> Iterator[CheckOccurrence]:
    """
    Yield every check tag in *text*, left to right, non-overlapping.

    ``None`` or empty text yields nothing.
    """
    if not text:
        return

    pos = 0
    while True:
        opener = OPEN_PATTERN.search(text, pos)
        if opener is None:
            return
        body_start = opener.end()
        close = text.find(CHECK_CLOSE, body_start)
        if close == -1:
            return

        key = KEY_PATTERN.search(text, body_start, close)
        if key is not None:
            yield CheckOccurrence(
                prefix=text[body_start:key.start()],
                value=int(key.group(1), 10),
                suffix=text[key.end():close],
                start=opener.start(),
                end=close + 1,
            )
        pos = close + 1


def list_checks(text: Optional[str]) -> List[CheckOccurrence]:
    return list(find_checks(text))


def has_checks(text: Optional[str]) -> bool:
    """Return True if *text* contains at least one check tag."""
    return next(find_checks(text), None) is not None
