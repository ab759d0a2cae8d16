"""Bookkeeping of executed statements and their parameters."""

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Optional, Union, overload

from mypy_extensions import mypyc_attr

from sqlstub.core.parameters import ParameterBinding, create_parameter_binding
from sqlstub.typing import StatementParameters
from sqlstub.utils.logging import get_logger

__all__ = ("InvocationLedger", "ParameterSets")

logger = get_logger("sqlstub.core.ledger")


@mypyc_attr(allow_interpreted_subclasses=False)
class ParameterSets(Sequence[ParameterBinding]):
    """Parameter bindings of every execution of one statement, in execution order.

    Callers get a read-only sequence; only the ledger appends to it.
    """

    __slots__ = ("_parameter_sets", "sql")

    def __init__(self, sql: str) -> None:
        self.sql = sql
        self._parameter_sets: list[ParameterBinding] = []

    def _append(self, parameters: ParameterBinding) -> None:
        self._parameter_sets.append(parameters)

    @property
    def number_of_parameter_sets(self) -> int:
        return len(self._parameter_sets)

    def get_parameter_set(self, index: int) -> ParameterBinding:
        """Return the binding of the ``index``-th execution (0-based)."""
        return self._parameter_sets[index]

    @overload
    def __getitem__(self, index: int) -> ParameterBinding: ...

    @overload
    def __getitem__(self, index: slice) -> "list[ParameterBinding]": ...

    def __getitem__(self, index: Union[int, slice]) -> "Union[ParameterBinding, list[ParameterBinding]]":
        return self._parameter_sets[index]

    def __iter__(self) -> Iterator[ParameterBinding]:
        return iter(self._parameter_sets)

    def __len__(self) -> int:
        return len(self._parameter_sets)

    def __repr__(self) -> str:
        return f"ParameterSets(sql={self.sql!r}, parameter_sets={self._parameter_sets!r})"


@mypyc_attr(allow_interpreted_subclasses=False)
class InvocationLedger:
    """Append-only record of every statement execution.

    Recording is unconditional: it never consults the response registries, so
    executions that found no stub response are recorded too.
    """

    __slots__ = ("_executed",)

    def __init__(self) -> None:
        self._executed: dict[str, ParameterSets] = {}

    def record(self, sql: str, parameters: StatementParameters = None) -> ParameterBinding:
        """Append a snapshot of ``parameters`` to the history of ``sql``.

        Args:
            sql: Executed statement text
            parameters: Parameters bound for this execution

        Returns:
            The stored snapshot
        """
        snapshot = create_parameter_binding(parameters, validate_keys=False)
        parameter_sets = self._executed.get(sql)
        if parameter_sets is None:
            parameter_sets = ParameterSets(sql)
            self._insert_sorted(sql, parameter_sets)
        parameter_sets._append(snapshot)
        logger.debug("Recorded execution %d of %r", len(parameter_sets), sql)
        return snapshot

    def _insert_sorted(self, sql: str, parameter_sets: ParameterSets) -> None:
        # Reorder in place so views handed out earlier stay live
        entries = sorted((*self._executed.items(), (sql, parameter_sets)), key=lambda item: item[0])
        self._executed.clear()
        self._executed.update(entries)

    def query(self, sql: str) -> Optional[ParameterSets]:
        """History of ``sql``, or None if it never executed."""
        return self._executed.get(sql)

    def view(self) -> Mapping[str, ParameterSets]:
        """Read-only live view of the whole ledger, keyed by statement text in sorted order."""
        return MappingProxyType(self._executed)

    def executed_statements(self) -> "list[str]":
        """Executed statements in sorted order."""
        return list(self._executed)

    def clear(self) -> None:
        self._executed.clear()

    def __len__(self) -> int:
        return len(self._executed)

    def __contains__(self, sql: object) -> bool:
        return sql in self._executed
