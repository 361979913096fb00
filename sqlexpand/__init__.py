from sqlexpand import exceptions
from sqlexpand.driver import AsyncExpandingDriver, ExpandingDriver, run
from sqlexpand.exceptions import ParameterShapeError, SQLExpandError
from sqlexpand.parameters import (
    ExpansionConfig,
    ExpansionResult,
    Occurrence,
    ParameterExpander,
    ParameterMode,
    ScalarParameter,
    SequenceParameter,
    expand,
    select_mode,
    tokenize,
)

__all__ = (
    "AsyncExpandingDriver",
    "ExpandingDriver",
    "ExpansionConfig",
    "ExpansionResult",
    "Occurrence",
    "ParameterExpander",
    "ParameterMode",
    "ParameterShapeError",
    "SQLExpandError",
    "ScalarParameter",
    "SequenceParameter",
    "exceptions",
    "expand",
    "run",
    "select_mode",
    "tokenize",
)
