"""Core parameter types used by the expander.

Bound values are modelled as a two-variant tagged union
(:class:`ScalarParameter` / :class:`SequenceParameter`) so the shape check for
bracketed placeholders is a single ``isinstance`` against one of two classes.
"""

from collections.abc import Generator, Iterable
from enum import Enum
from typing import Any, Optional, Union

from mypy_extensions import mypyc_attr

__all__ = (
    "ExpansionResult",
    "Occurrence",
    "ParameterMode",
    "ParameterValue",
    "ScalarParameter",
    "SequenceParameter",
    "classify_value",
    "unwrap_value",
)


class ParameterMode(str, Enum):
    """How a parameter set binds to placeholders."""

    POSITIONAL = "positional"
    NAMED = "named"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


class ScalarParameter:
    """An opaque value bound to exactly one placeholder."""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return bool(self.value == other.value)

    def __hash__(self) -> int:
        try:
            return hash((type(self).__name__, self.value))
        except TypeError:
            return hash((type(self).__name__, repr(self.value)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self.value!r})"


class SequenceParameter:
    """An ordered run of scalars bound to a bracketed placeholder."""

    __slots__ = ("values",)

    def __init__(self, values: Iterable[Any]) -> None:
        self.values: tuple[Any, ...] = tuple(values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> "Generator[Any, None, None]":
        yield from self.values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.values == other.values

    def __hash__(self) -> int:
        return hash((type(self).__name__, repr(self.values)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(values={list(self.values)!r})"


ParameterValue = Union[ScalarParameter, SequenceParameter]


def classify_value(value: Any) -> ParameterValue:
    """Tag a raw bound value as scalar or sequence.

    Only ``list`` and ``tuple`` count as sequences. Strings, bytes, mappings and
    sets are scalars. Values that are already tagged are returned unchanged.
    """
    if isinstance(value, (ScalarParameter, SequenceParameter)):
        return value
    if isinstance(value, (list, tuple)):
        return SequenceParameter(value)
    return ScalarParameter(value)


def unwrap_value(value: Any) -> Any:
    """Return the raw value the execution layer should bind."""
    if isinstance(value, ScalarParameter):
        return value.value
    if isinstance(value, SequenceParameter):
        return list(value.values)
    return value


class Occurrence:
    """A placeholder token found in the original query text."""

    __slots__ = ("bracketed", "offset", "text")

    def __init__(self, text: str, offset: int, bracketed: bool = False) -> None:
        self.text = text
        self.offset = offset
        self.bracketed = bracketed

    @property
    def name(self) -> Optional[str]:
        """Identifier of a named token, ``None`` for ``?`` tokens."""
        stripped = self.text.strip("[]")
        if stripped.startswith(":"):
            return stripped[1:]
        return None

    @property
    def end(self) -> int:
        return self.offset + len(self.text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.text == other.text and self.offset == other.offset and self.bracketed == other.bracketed

    def __hash__(self) -> int:
        return hash((self.text, self.offset, self.bracketed))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(text={self.text!r}, offset={self.offset!r}, bracketed={self.bracketed!r})"


@mypyc_attr(allow_interpreted_subclasses=False)
class ExpansionResult:
    """Return container for expansion output.

    Unpacks as ``(sql, parameters)`` so it can be handed straight to a cursor.
    """

    __slots__ = ("mode", "occurrences", "parameters", "sql")

    def __init__(
        self,
        sql: str,
        parameters: "Union[list[Any], dict[Any, Any]]",
        mode: ParameterMode,
        occurrences: "tuple[Occurrence, ...]" = (),
    ) -> None:
        self.sql = sql
        self.parameters = parameters
        self.mode = mode
        self.occurrences = occurrences

    def __iter__(self) -> "Generator[Any, None, None]":
        yield self.sql
        yield self.parameters

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int) -> Any:
        if index == 0:
            return self.sql
        if index == 1:
            return self.parameters
        msg = "ExpansionResult exposes exactly two positional items"
        raise IndexError(msg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.sql == other.sql and self.parameters == other.parameters and self.mode == other.mode

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, parameters={self.parameters!r}, mode={self.mode!r})"
