"""Array placeholder expansion.

Rewrites ``[?]`` and ``[:name]`` placeholders into runs of singular
placeholders and flattens the bound values to match::

    >>> expand("select * from t where v = ? or v in ([?])", [1, [2, 3, 4]])
    ExpansionResult(sql='select * from t where v = ? or v in ( ?, ?, ? )', parameters=[1, 2, 3, 4], mode=<ParameterMode.POSITIONAL: 'positional'>)

Occurrences are processed from the highest offset down, so each edit is made
against offsets of the original query. The output text is assembled once by
copying the untouched spans between edits.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from sqlexpand.exceptions import ImproperConfigurationError, ParameterShapeError
from sqlexpand.parameters.config import ExpansionConfig
from sqlexpand.parameters.tokenizer import filter_quoted, tokenize
from sqlexpand.parameters.types import (
    ExpansionResult,
    Occurrence,
    ParameterMode,
    SequenceParameter,
    classify_value,
    unwrap_value,
)
from sqlexpand.typing import StatementParameters
from sqlexpand.utils.logging import get_logger, log_with_context

__all__ = (
    "ParameterExpander",
    "expand",
    "expand_named",
    "expand_positional",
    "select_mode",
)

logger = get_logger("parameters.expander")

_DEFAULT_CONFIG = ExpansionConfig()


def _is_dense_index_mapping(parameters: "Mapping[Any, Any]") -> bool:
    keys = list(parameters.keys())
    if not all(isinstance(key, int) and not isinstance(key, bool) for key in keys):
        return False
    return set(keys) == set(range(len(keys)))


def select_mode(parameters: StatementParameters) -> ParameterMode:
    """Decide whether a parameter set binds by position or by name.

    A set is positional when its keys are exactly ``0..len - 1``: any sequence,
    or a mapping keyed by those integers. ``None`` and empty sets are positional.

    Args:
        parameters: The bound values.

    Returns:
        The binding mode.
    """
    if parameters is None:
        return ParameterMode.POSITIONAL
    if isinstance(parameters, Mapping):
        return ParameterMode.POSITIONAL if _is_dense_index_mapping(parameters) else ParameterMode.NAMED
    return ParameterMode.POSITIONAL


def _as_positional_list(parameters: StatementParameters) -> "list[Any]":
    if parameters is None:
        return []
    if isinstance(parameters, Mapping):
        return [parameters[index] for index in range(len(parameters))]
    if isinstance(parameters, (str, bytes)):
        # a bare string is one value, not a sequence of characters
        return [parameters]
    if isinstance(parameters, Sequence):
        return list(parameters)
    return [parameters]


def _render_run(placeholders: "list[str]", config: ExpansionConfig) -> str:
    return f"{config.padding}{config.separator.join(placeholders)}{config.padding}"


def _apply_edits(sql: str, edits: "list[tuple[Occurrence, str]]") -> str:
    """Rebuild ``sql`` with each occurrence replaced by its text.

    ``edits`` must be ordered by decreasing offset and must not overlap.
    """
    if not edits:
        return sql
    pieces: list[str] = []
    tail = len(sql)
    for occurrence, replacement in edits:
        pieces.append(sql[occurrence.end : tail])
        pieces.append(replacement)
        tail = occurrence.offset
    pieces.append(sql[:tail])
    return "".join(reversed(pieces))


def _scan(sql: str, mode: ParameterMode) -> "tuple[tuple[Occurrence, ...], int]":
    found = tokenize(sql, mode)
    kept = filter_quoted(sql, found)
    return kept, len(found) - len(kept)


def expand_positional(
    sql: str, parameters: StatementParameters, config: Optional[ExpansionConfig] = None
) -> ExpansionResult:
    """Expand ``[?]`` placeholders against positional values.

    Surviving occurrences are walked from the end of the query. The N-th
    occurrence from the end binds to the N-th value from the end; quoted
    occurrences do not consume a value.

    Args:
        sql: The original query text.
        parameters: Values in placeholder order.
        config: Output formatting settings.

    Raises:
        ParameterShapeError: If a ``[?]`` is bound to a value that is not a sequence.

    Returns:
        The rewritten query and the flattened value list.
    """
    config = config or _DEFAULT_CONFIG
    values = _as_positional_list(parameters)
    occurrences, skipped = _scan(sql, ParameterMode.POSITIONAL)

    if not occurrences:
        return ExpansionResult(sql, [unwrap_value(value) for value in values], ParameterMode.POSITIONAL)

    edits: list[tuple[Occurrence, str]] = []
    expansions: dict[int, SequenceParameter] = {}
    param_idx = len(values)
    for occurrence in reversed(occurrences):
        param_idx -= 1
        if not occurrence.bracketed:
            continue
        if param_idx < 0:
            raise ParameterShapeError(occurrence.text, sql=sql)
        value = classify_value(values[param_idx])
        if not isinstance(value, SequenceParameter):
            raise ParameterShapeError(occurrence.text, sql=sql)
        if not value.values:
            logger.debug("Expanding %s at offset %d to an empty run", occurrence.text, occurrence.offset)
        expansions[param_idx] = value
        edits.append((occurrence, _render_run(["?"] * len(value), config)))

    flattened: list[Any] = []
    for index, value in enumerate(values):
        if index in expansions:
            flattened.extend(unwrap_value(item) for item in expansions[index])
        else:
            flattened.append(unwrap_value(value))

    log_with_context(
        logger,
        logging.DEBUG,
        "Expanded positional placeholders",
        placeholders=len(occurrences),
        quoted_skipped=skipped,
        arrays_expanded=len(expansions),
        parameter_count=len(flattened),
    )
    return ExpansionResult(_apply_edits(sql, edits), flattened, ParameterMode.POSITIONAL, occurrences)


def _fresh_key(name: str, taken: "set[Any]", config: ExpansionConfig) -> str:
    for _ in range(config.max_key_attempts):
        candidate = config.key_factory(name)
        if candidate not in taken:
            return candidate
    msg = f"Could not generate an unused key for parameter {name!r} after {config.max_key_attempts} attempts"
    raise ImproperConfigurationError(msg)


def expand_named(
    sql: str, parameters: "Mapping[Any, Any]", config: Optional[ExpansionConfig] = None
) -> ExpansionResult:
    """Expand ``[:name]`` placeholders against named values.

    Each element of the bound sequence is stored under a freshly generated key
    and the bracketed token is replaced by the matching ``:key`` placeholders.
    Plain ``:name`` placeholders and their values are left alone. Expanded array
    entries are removed from the returned mapping.

    Args:
        sql: The original query text.
        parameters: Values keyed by placeholder name.
        config: Key generation and formatting settings.

    Raises:
        ParameterShapeError: If a ``[:name]`` is bound to a value that is not a sequence,
            or ``name`` is not bound at all.

    Returns:
        The rewritten query and the new value mapping.
    """
    config = config or _DEFAULT_CONFIG
    occurrences, skipped = _scan(sql, ParameterMode.NAMED)

    flattened: dict[Any, Any] = {key: value for key, value in parameters.items()}
    taken: set[Any] = set(flattened)
    expanded_names: set[str] = set()
    edits: list[tuple[Occurrence, str]] = []

    for occurrence in reversed(occurrences):
        if not occurrence.bracketed:
            continue
        name = occurrence.name
        if name is None or name not in parameters:
            raise ParameterShapeError(occurrence.text, sql=sql)
        value = classify_value(parameters[name])
        if not isinstance(value, SequenceParameter):
            raise ParameterShapeError(occurrence.text, sql=sql)

        keys: list[str] = []
        for item in value:
            key = _fresh_key(name, taken, config)
            taken.add(key)
            flattened[key] = item
            keys.append(key)
        expanded_names.add(name)
        edits.append((occurrence, _render_run([f"{config.named_marker}{key}" for key in keys], config)))

    for name in expanded_names:
        flattened.pop(name, None)

    flattened = {key: unwrap_value(value) for key, value in flattened.items()}

    if edits:
        log_with_context(
            logger,
            logging.DEBUG,
            "Expanded named placeholders",
            placeholders=len(occurrences),
            quoted_skipped=skipped,
            arrays_expanded=len(edits),
            parameter_count=len(flattened),
        )
    return ExpansionResult(_apply_edits(sql, edits), flattened, ParameterMode.NAMED, occurrences)


class ParameterExpander:
    """Expands array placeholders using a fixed configuration."""

    __slots__ = ("config",)

    def __init__(self, config: Optional[ExpansionConfig] = None) -> None:
        self.config = config or _DEFAULT_CONFIG

    def expand(self, sql: str, parameters: StatementParameters = None) -> ExpansionResult:
        """Rewrite ``sql`` and flatten ``parameters``.

        Args:
            sql: Query text using ``?``/``[?]`` or ``:name``/``[:name]`` placeholders.
            parameters: Positional sequence, named mapping, or ``None``.

        Raises:
            ParameterShapeError: If a bracketed placeholder is bound to a non-sequence value.

        Returns:
            The rewritten query and the values to bind to it.
        """
        mode = select_mode(parameters)
        if mode is ParameterMode.NAMED:
            return expand_named(sql, parameters, self.config)  # type: ignore[arg-type]
        return expand_positional(sql, parameters, self.config)


def expand(
    sql: str, parameters: StatementParameters = None, config: Optional[ExpansionConfig] = None
) -> ExpansionResult:
    """Expand array placeholders in ``sql``.

    Shortcut for ``ParameterExpander(config).expand(sql, parameters)``.
    """
    return ParameterExpander(config).expand(sql, parameters)
