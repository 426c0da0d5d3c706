"""
Offset Adjuster — rewrites the DC of check tags by an entity level.

The new DC is ``dc - level`` with no clamping: zero and negative results are
written as-is.  Only the number changes; prefix and suffix are copied
verbatim and the tag is rebuilt as ``@Check[<prefix>dc:<new><suffix>]``.
"""
from __future__ import annotations

from typing import List

from pwl_dc_adjuster.adjustment.check_matcher import find_checks
from pwl_dc_adjuster.models.annotation import CheckOccurrence


def adjusted_value(value: int, level: int) -> int:
    return value - level


def render_check(occurrence: CheckOccurrence, level: int) -> str:
    """Return the tag text for *occurrence* with its DC lowered by *level*."""
    return occurrence.render(adjusted_value(occurrence.value, level))


def adjust_text(text: str, level: int) -> str:
    """
    Lower every check DC in *text* by *level* in a single left-to-right pass.

    Text outside the tags is returned unchanged.
    """
    if not text:
        return text

    parts: List[str] = []
    last = 0
    for occurrence in find_checks(text):
        parts.append(text[last:occurrence.start])
        parts.append(render_check(occurrence, level))
        last = occurrence.end
    if last == 0:
        return text
    parts.append(text[last:])
    return "".join(parts)
