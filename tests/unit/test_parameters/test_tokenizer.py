"""Tests for placeholder scanning and the double-quote filter."""

import pytest

from sqlexpand.parameters.tokenizer import filter_quoted, is_inside_quotes, tokenize
from sqlexpand.parameters.types import Occurrence, ParameterMode


def test_tokenize_positional_plain_and_bracketed() -> None:
    """Test that ? and [?] are found with their original offsets."""
    occurrences = tokenize("select ? , [?] from t", ParameterMode.POSITIONAL)

    assert occurrences == (Occurrence("?", 7), Occurrence("[?]", 11, bracketed=True))


def test_tokenize_named_plain_and_bracketed() -> None:
    occurrences = tokenize("where a = :a and b in ([:bs])", ParameterMode.NAMED)

    assert occurrences == (Occurrence(":a", 10), Occurrence("[:bs]", 23, bracketed=True))
    assert [o.name for o in occurrences] == ["a", "bs"]


def test_tokenize_offsets_strictly_increasing() -> None:
    sql = "? [?] ? [?] [?] ?"
    offsets = [o.offset for o in tokenize(sql, ParameterMode.POSITIONAL)]

    assert offsets == sorted(set(offsets))
    assert len(offsets) == 6


def test_tokenize_grammars_are_disjoint() -> None:
    """Test that each mode only sees its own placeholder syntax."""
    sql = "select ?, :name, [?], [:ids]"

    assert [o.text for o in tokenize(sql, ParameterMode.POSITIONAL)] == ["?", "[?]"]
    assert [o.text for o in tokenize(sql, ParameterMode.NAMED)] == [":name", "[:ids]"]


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("[?", [Occurrence("?", 1)]),
        ("?]", [Occurrence("?", 0)]),
        ("[ ? ]", [Occurrence("?", 2)]),
        ("[]", []),
        ("no placeholders here", []),
    ],
    ids=["unclosed", "unopened", "spaced", "empty_brackets", "none"],
)
def test_tokenize_positional_edge_cases(sql: str, expected: "list[Occurrence]") -> None:
    assert list(tokenize(sql, ParameterMode.POSITIONAL)) == expected


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("[:a", [Occurrence(":a", 1)]),
        (":a]", [Occurrence(":a", 0)]),
        ("[:]", []),
        ("a : b", []),
        ("select x::int", [Occurrence(":int", 9)]),
        ("[:user_id2]", [Occurrence("[:user_id2]", 0, bracketed=True)]),
    ],
    ids=["unclosed", "unopened", "empty_name", "bare_colon", "cast", "word_chars"],
)
def test_tokenize_named_edge_cases(sql: str, expected: "list[Occurrence]") -> None:
    assert list(tokenize(sql, ParameterMode.NAMED)) == expected


def test_tokenize_named_stops_at_non_ascii() -> None:
    occurrences = tokenize("v = :café", ParameterMode.NAMED)

    assert [o.text for o in occurrences] == [":caf"]


def test_is_inside_quotes_odd_count() -> None:
    sql = 'select "?" , ?'

    assert is_inside_quotes(sql, 8) is True
    assert is_inside_quotes(sql, 13) is False


def test_is_inside_quotes_ignores_escaped_quote() -> None:
    sql = 'select "a\\"?'

    assert is_inside_quotes(sql, sql.index("?")) is True


def test_is_inside_quotes_ignores_single_quotes() -> None:
    """Single-quoted literals are not tracked."""
    assert is_inside_quotes("select '?'", 8) is False


def test_filter_quoted_matches_per_offset_check() -> None:
    sql = 'select "[?]", ? , "a \\" [?]" , [?] "?"'
    occurrences = tokenize(sql, ParameterMode.POSITIONAL)

    kept = filter_quoted(sql, occurrences)

    assert kept == tuple(o for o in occurrences if not is_inside_quotes(sql, o.offset))
    assert [o.text for o in kept] == ["?", "[?]"]


def test_filter_quoted_empty() -> None:
    assert filter_quoted("select 1", ()) == ()
