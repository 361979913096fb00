from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from typing_extensions import TypeAlias

__all__ = (
    "NamedParameters",
    "PositionalParameters",
    "StatementParameters",
)

PositionalParameters: TypeAlias = Union[Sequence[Any], Mapping[int, Any]]
"""Values bound by left-to-right placeholder order."""
NamedParameters: TypeAlias = Mapping[str, Any]
"""Values bound by identifier."""
StatementParameters: TypeAlias = Optional[Union[PositionalParameters, NamedParameters]]
"""Anything accepted as the parameter set of a query."""
