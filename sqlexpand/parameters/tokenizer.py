"""Placeholder scanning.

Placeholders are located by an explicit left-to-right scan rather than a
regular expression, so every :class:`~sqlexpand.parameters.types.Occurrence`
carries the offset of its first character in the original, unmodified query.

Two grammars are recognised, one per :class:`ParameterMode`:

- positional: ``?`` and ``[?]``
- named: ``:name`` and ``[:name]`` where ``name`` is one or more ASCII word
  characters

Quoted text is not skipped here; use :func:`filter_quoted` on the result.
"""

import string
from typing import Final

from sqlexpand.parameters.types import Occurrence, ParameterMode

__all__ = ("filter_quoted", "is_inside_quotes", "tokenize")

WORD_CHARACTERS: Final = frozenset(string.ascii_letters + string.digits + "_")
BRACKETED_QMARK: Final = "[?]"


def _scan_name(sql: str, start: int) -> int:
    """Return the index just past the run of word characters starting at ``start``."""
    end = start
    length = len(sql)
    while end < length and sql[end] in WORD_CHARACTERS:
        end += 1
    return end


def _tokenize_positional(sql: str) -> "list[Occurrence]":
    occurrences: list[Occurrence] = []
    index = 0
    length = len(sql)
    while index < length:
        char = sql[index]
        if char == "[" and sql.startswith(BRACKETED_QMARK, index):
            occurrences.append(Occurrence(BRACKETED_QMARK, index, bracketed=True))
            index += len(BRACKETED_QMARK)
            continue
        if char == "?":
            occurrences.append(Occurrence("?", index))
        index += 1
    return occurrences


def _tokenize_named(sql: str) -> "list[Occurrence]":
    occurrences: list[Occurrence] = []
    index = 0
    length = len(sql)
    while index < length:
        char = sql[index]
        if char == "[" and index + 1 < length and sql[index + 1] == ":":
            name_end = _scan_name(sql, index + 2)
            if name_end > index + 2 and name_end < length and sql[name_end] == "]":
                occurrences.append(Occurrence(sql[index : name_end + 1], index, bracketed=True))
                index = name_end + 1
                continue
            # unclosed bracket, the colon is picked up on the next pass
            index += 1
            continue
        if char == ":":
            name_end = _scan_name(sql, index + 1)
            if name_end > index + 1:
                occurrences.append(Occurrence(sql[index:name_end], index))
                index = name_end
                continue
        index += 1
    return occurrences


def tokenize(sql: str, mode: ParameterMode) -> "tuple[Occurrence, ...]":
    """Find every placeholder of the given mode in ``sql``.

    Args:
        sql: The original query text.
        mode: Which placeholder grammar to scan for.

    Returns:
        Occurrences ordered by strictly increasing offset.
    """
    if mode is ParameterMode.NAMED:
        return tuple(_tokenize_named(sql))
    return tuple(_tokenize_positional(sql))


def _is_unescaped_quote(sql: str, index: int) -> bool:
    return sql[index] == '"' and (index == 0 or sql[index - 1] != "\\")


def is_inside_quotes(sql: str, offset: int) -> bool:
    """Check whether ``offset`` falls inside a double-quoted literal.

    Counts the double quotes before ``offset`` that are not directly preceded by
    a backslash. An odd count means a quoted region is still open. Single quotes
    are not tracked.
    """
    count = sum(1 for index in range(min(offset, len(sql))) if _is_unescaped_quote(sql, index))
    return count % 2 == 1


def filter_quoted(sql: str, occurrences: "tuple[Occurrence, ...]") -> "tuple[Occurrence, ...]":
    """Drop occurrences that sit inside double-quoted literals.

    Equivalent to calling :func:`is_inside_quotes` for each occurrence, but the
    quote parity is carried forward in a single pass over ``sql``.

    Args:
        sql: The original query text.
        occurrences: Occurrences in increasing offset order.

    Returns:
        The occurrences that are real placeholders, in the same order.
    """
    kept: list[Occurrence] = []
    inside = False
    cursor = 0
    for occurrence in occurrences:
        while cursor < occurrence.offset:
            if _is_unescaped_quote(sql, cursor):
                inside = not inside
            cursor += 1
        if not inside:
            kept.append(occurrence)
    return tuple(kept)
