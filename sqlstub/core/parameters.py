"""Parameter bindings and the parameter comparison contract.

Components:
- ParameterBinding: immutable snapshot of one statement's bound parameters
- create_parameter_binding: funnels every accepted parameter shape into a binding
- compare_parameter: value equality with type-aware coercion
- SubsetParameterMatch / ExactParameterMatch: named comparison strategies

Only this module inspects parameter value types. The registry, matcher and
resolver treat values as opaque.
"""

import io
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping, Sequence
from functools import singledispatch
from numbers import Number
from typing import Any, Final, Optional

from mypy_extensions import mypyc_attr

from sqlstub.exceptions import RegistrationError
from sqlstub.typing import ParameterKey, StatementParameters

__all__ = (
    "EXACT_PARAMETER_MATCH",
    "SUBSET_PARAMETER_MATCH",
    "ExactParameterMatch",
    "ParameterBinding",
    "ParameterMatchStrategy",
    "SubsetParameterMatch",
    "compare_parameter",
    "create_parameter_binding",
    "get_parameter_strategy",
)


@mypyc_attr(allow_interpreted_subclasses=False)
class ParameterBinding(Mapping[ParameterKey, Any]):
    """Read-only mapping of parameter identifier to bound value.

    Positional parameters use 1-based integer indexes; named parameters of
    callable statements use their name. The constructor copies the supplied
    mapping, so later changes to the caller's dict are not seen here.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[ParameterKey, Any]] = None) -> None:
        self._data: dict[ParameterKey, Any] = dict(data) if data else {}

    def __getitem__(self, key: ParameterKey) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[ParameterKey]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def to_dict(self) -> dict[ParameterKey, Any]:
        """Return a mutable copy of the binding."""
        return dict(self._data)

    def __repr__(self) -> str:
        return f"ParameterBinding({self._data!r})"


def create_parameter_binding(parameters: StatementParameters = None, validate_keys: bool = True) -> ParameterBinding:
    """Build a binding from any accepted parameter shape.

    Args:
        parameters: ``None``, a mapping of index/name to value, or a positional
            sequence whose 0-based positions become 1-based indexes.
        validate_keys: Reject mapping keys that are neither 1-based indexes nor names.
            When off, other iterables such as generators are accepted and consumed
            in iteration order.

    Raises:
        RegistrationError: If the shape or a key is not acceptable.

    Returns:
        A fresh ParameterBinding.
    """
    if parameters is None:
        return ParameterBinding()
    if isinstance(parameters, ParameterBinding):
        return parameters
    if isinstance(parameters, Mapping):
        if validate_keys:
            for key in parameters:
                _validate_parameter_key(key)
        return ParameterBinding(parameters)
    if isinstance(parameters, Sequence) and not isinstance(parameters, (str, bytes, bytearray)):
        return ParameterBinding({index: value for index, value in enumerate(parameters, start=1)})
    if not validate_keys and isinstance(parameters, Iterable) and not isinstance(parameters, (str, bytes, bytearray)):
        return ParameterBinding({index: value for index, value in enumerate(tuple(parameters), start=1)})
    msg = f"Unsupported parameter container {type(parameters).__name__!r}, expected a sequence or a mapping"
    raise RegistrationError(msg)


def _validate_parameter_key(key: Any) -> None:
    if isinstance(key, bool):
        msg = f"Invalid parameter key {key!r}"
        raise RegistrationError(msg)
    if isinstance(key, int):
        if key < 1:
            msg = f"Positional parameter indexes are 1-based, got {key}"
            raise RegistrationError(msg)
        return
    if isinstance(key, str) and key:
        return
    msg = f"Invalid parameter key {key!r}, expected a positive int or a parameter name"
    raise RegistrationError(msg)


@singledispatch
def _comparable_value(value: Any) -> Any:
    """Reduce a value to the form used for comparison.

    Args:
        value: Bound parameter value

    Returns:
        The value itself, or its content for binary and in-memory stream types
    """
    return value


@_comparable_value.register(bytes)
@_comparable_value.register(bytearray)
@_comparable_value.register(memoryview)
def _(value: Any) -> bytes:
    return bytes(value)


@_comparable_value.register
def _(value: io.BytesIO) -> bytes:
    return value.getvalue()


@_comparable_value.register
def _(value: io.StringIO) -> str:
    return value.getvalue()


def compare_parameter(expected: Any, actual: Any) -> bool:
    """Compare an expected parameter value with an actual one.

    Rules:
    - ``None`` only equals ``None`` and booleans only equal booleans
    - numbers compare by numeric value regardless of their type
    - binary values and in-memory streams compare by content
    - lists, tuples and mappings compare element-wise with these same rules
    - anything else falls back to ``==``

    Args:
        expected: The registered value
        actual: The value bound at execution time

    Returns:
        True if the values are considered equal
    """
    if expected is actual:
        return True
    if expected is None or actual is None:
        return False

    left = _comparable_value(expected)
    right = _comparable_value(actual)

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Number) and isinstance(right, Number):
        return bool(left == right)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(compare_parameter(e, a) for e, a in zip(left, right))
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if len(left) != len(right):
            return False
        return all(key in right and compare_parameter(value, right[key]) for key, value in left.items())
    return bool(left == right)


class ParameterMatchStrategy(ABC):
    """Decides whether an actual binding satisfies a registered one."""

    __slots__ = ()

    name: str = ""

    @abstractmethod
    def matches(self, expected: Mapping[ParameterKey, Any], actual: Mapping[ParameterKey, Any]) -> bool:
        """Check the actual binding against the expected one.

        Args:
            expected: Binding stored at registration
            actual: Binding supplied at execution

        Returns:
            True if the entry applies to this execution
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SubsetParameterMatch(ParameterMatchStrategy):
    """Every expected parameter must be bound to an equal value; extra actual parameters are ignored."""

    __slots__ = ()

    name = "subset"

    def matches(self, expected: Mapping[ParameterKey, Any], actual: Mapping[ParameterKey, Any]) -> bool:
        for key, expected_value in expected.items():
            if key not in actual:
                return False
            if not compare_parameter(expected_value, actual[key]):
                return False
        return True


class ExactParameterMatch(ParameterMatchStrategy):
    """Both bindings must hold the same keys with equal values."""

    __slots__ = ()

    name = "exact"

    def matches(self, expected: Mapping[ParameterKey, Any], actual: Mapping[ParameterKey, Any]) -> bool:
        if len(expected) != len(actual):
            return False
        for key, expected_value in expected.items():
            if key not in actual:
                return False
            if not compare_parameter(expected_value, actual[key]):
                return False
        # Equal sizes plus every expected key present means the key sets are identical
        return True


SUBSET_PARAMETER_MATCH: Final = SubsetParameterMatch()
EXACT_PARAMETER_MATCH: Final = ExactParameterMatch()


def get_parameter_strategy(exact_match_parameter: bool) -> ParameterMatchStrategy:
    """Select the comparison strategy for the ``exact_match_parameter`` flag."""
    return EXACT_PARAMETER_MATCH if exact_match_parameter else SUBSET_PARAMETER_MATCH
