"""Tests for [?] expansion against positional parameters."""

from typing import Any

import pytest

from sqlexpand.exceptions import ParameterShapeError
from sqlexpand.parameters import ExpansionConfig, ParameterMode, ScalarParameter, SequenceParameter, expand
from sqlexpand.parameters.expander import expand_positional


def test_expand_array_between_scalars() -> None:
    result = expand("select * from t where v = ? or v in ([?]) or v = ?", [0, [6, 7], 10])

    assert result.sql == "select * from t where v = ? or v in ( ?, ? ) or v = ?"
    assert result.parameters == [0, 6, 7, 10]
    assert result.mode is ParameterMode.POSITIONAL


def test_expand_result_unpacks_to_sql_and_parameters() -> None:
    sql, parameters = expand("v in ([?])", [[1, 2, 3]])

    assert sql == "v in ( ?, ?, ? )"
    assert parameters == [1, 2, 3]


def test_expand_without_placeholders_is_identity() -> None:
    sql, parameters = expand("select 1", [])

    assert sql == "select 1"
    assert parameters == []


def test_expand_plain_placeholders_unchanged() -> None:
    sql, parameters = expand("insert into test (val) values (?), (?)", (2, 3))

    assert sql == "insert into test (val) values (?), (?)"
    assert parameters == [2, 3]


def test_expand_none_parameters() -> None:
    assert tuple(expand("select 1")) == ("select 1", [])


def test_expand_two_arrays_of_different_lengths() -> None:
    """Both rewrites land in the right place regardless of processing order."""
    sql, parameters = expand("a in ([?]) and b in ([?]) and c = ?", [[1, 2, 3], [4], 5])

    assert sql == "a in ( ?, ?, ? ) and b in ( ? ) and c = ?"
    assert parameters == [1, 2, 3, 4, 5]


def test_expand_skips_quoted_bracket_token() -> None:
    sql, parameters = expand('select "[?]", v from t where v in ([?])', [[1, 2]])

    assert sql == 'select "[?]", v from t where v in ( ?, ? )'
    assert parameters == [1, 2]


def test_expand_quoted_placeholder_does_not_consume_a_value() -> None:
    sql, parameters = expand('select "?" , ? , [?]', [1, [2, 3]])

    assert sql == 'select "?" , ? ,  ?, ? '
    assert parameters == [1, 2, 3]


def test_expand_scalar_bound_to_bracket_fails() -> None:
    with pytest.raises(ParameterShapeError, match=r"Found \[\?\] in query, but parameter is not an array") as exc_info:
        expand("select * from test where val = [?]", ["not an array"])

    assert exc_info.value.placeholder == "[?]"
    assert exc_info.value.sql == "select * from test where val = [?]"


@pytest.mark.parametrize(
    "value",
    [42, "abc", b"abc", {"a": 1}, {1, 2}, None, ScalarParameter([1, 2])],
    ids=["int", "str", "bytes", "dict", "set", "none", "tagged_scalar"],
)
def test_expand_non_sequence_values_fail(value: Any) -> None:
    with pytest.raises(ParameterShapeError):
        expand("where v = [?]", [value])


def test_expand_missing_value_for_bracket_fails() -> None:
    with pytest.raises(ParameterShapeError) as exc_info:
        expand("v in ([?])", [])

    assert "[?]" in str(exc_info.value)


def test_expand_binds_from_the_end() -> None:
    """Extra leading values shift onto earlier placeholders, not the array."""
    sql, parameters = expand("v = ? and w in ([?])", ["extra", 1, [2, 3]])

    assert sql == "v = ? and w in ( ?, ? )"
    assert parameters == ["extra", 1, 2, 3]


def test_expand_list_bound_to_plain_placeholder_passes_through() -> None:
    sql, parameters = expand("v = ?", [[1, 2]])

    assert sql == "v = ?"
    assert parameters == [[1, 2]]


def test_expand_tagged_values_are_unwrapped() -> None:
    sql, parameters = expand("v = ? and w in ([?])", [ScalarParameter([1, 2]), SequenceParameter(iter([3, 4]))])

    assert sql == "v = ? and w in ( ?, ? )"
    assert parameters == [[1, 2], 3, 4]


def test_expand_tuple_sequence() -> None:
    assert expand("v in ([?])", [(1, 2)]).parameters == [1, 2]


def test_expand_empty_sequence() -> None:
    sql, parameters = expand("v in ([?])", [[]])

    assert sql == "v in (  )"
    assert parameters == []


def test_expand_dense_index_mapping() -> None:
    sql, parameters = expand("v = ? or w in ([?])", {1: [2, 3], 0: 1})

    assert sql == "v = ? or w in ( ?, ? )"
    assert parameters == [1, 2, 3]


def test_expand_custom_formatting() -> None:
    config = ExpansionConfig(separator=",", padding="")

    sql, _ = expand_positional("v in ([?])", [[1, 2]], config)

    assert sql == "v in (?,?)"


def test_expand_keeps_occurrences() -> None:
    result = expand('x "?" ? [?]', [1, [2]])

    assert [o.text for o in result.occurrences] == ["?", "[?]"]


def test_expand_does_not_mutate_input() -> None:
    parameters = [0, [6, 7], 10]

    expand("v = ? or v in ([?]) or v = ?", parameters)

    assert parameters == [0, [6, 7], 10]
