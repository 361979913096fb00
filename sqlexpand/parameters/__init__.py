"""Placeholder scanning and array expansion."""

from sqlexpand.parameters.config import ExpansionConfig, default_key_factory
from sqlexpand.parameters.expander import ParameterExpander, expand, expand_named, expand_positional, select_mode
from sqlexpand.parameters.tokenizer import filter_quoted, is_inside_quotes, tokenize
from sqlexpand.parameters.types import (
    ExpansionResult,
    Occurrence,
    ParameterMode,
    ParameterValue,
    ScalarParameter,
    SequenceParameter,
    classify_value,
    unwrap_value,
)

__all__ = (
    "ExpansionConfig",
    "ExpansionResult",
    "Occurrence",
    "ParameterExpander",
    "ParameterMode",
    "ParameterValue",
    "ScalarParameter",
    "SequenceParameter",
    "classify_value",
    "default_key_factory",
    "expand",
    "expand_named",
    "expand_positional",
    "filter_quoted",
    "is_inside_quotes",
    "select_mode",
    "tokenize",
    "unwrap_value",
)
