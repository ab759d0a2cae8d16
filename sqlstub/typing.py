from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from typing_extensions import TypeAlias, TypeVar

__all__ = (
    "ParameterKey",
    "PayloadT",
    "RawParameterMapping",
    "StatementParameters",
)

PayloadT = TypeVar("PayloadT", default=Any)
"""Type of the payload stored in a statement registry."""

ParameterKey: TypeAlias = Union[int, str]
"""1-based positional index, or a name for callable-statement named parameters."""

RawParameterMapping: TypeAlias = Mapping[ParameterKey, Any]

StatementParameters: TypeAlias = Optional[Union[RawParameterMapping, Sequence[Any]]]
"""Every parameter shape accepted at registration and recording time."""
