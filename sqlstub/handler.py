"""Stub response handler for parameterized statements.

:class:`ParameterResultSetHandler` is what a fake connection or cursor talks
to: tests prepare canned responses for ``(statement, parameters)`` pairs, the
fake driver asks for the response of each execution and records it, and the
test inspects the execution history afterward.

Example:
    >>> handler = ParameterResultSetHandler()
    >>> handler.prepare_update_count("UPDATE users SET name = ?", 1, ["Alice"])
    >>> handler.get_update_count("UPDATE users SET name = ? WHERE id = ?", {1: "Alice", 2: 7})
    1

A handler is not thread-safe. Registration, lookup and recording on one
handler from several threads need external locking by the caller.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from sqlstub.config import MatchConfig
from sqlstub.core.ledger import InvocationLedger, ParameterSets
from sqlstub.core.parameters import create_parameter_binding
from sqlstub.core.registry import ResponseCategory, StatementRegistry
from sqlstub.core.resolver import ResponseResolver
from sqlstub.exceptions import RegistrationError, SimulatedSQLError
from sqlstub.typing import StatementParameters
from sqlstub.utils.logging import get_logger

__all__ = ("ParameterResultSetHandler",)

logger = get_logger("sqlstub.handler")


class ParameterResultSetHandler:
    """Registry, resolver and execution ledger for prepared and callable statements.

    Every ``parameters`` argument accepts a positional sequence (mapped to
    1-based indexes), a mapping of index or name to value, or ``None`` for an
    empty binding. With the default subset parameter matching an empty
    binding answers every execution of the statement.

    Args:
        config: Match configuration; a default :class:`MatchConfig` is created if omitted.
    """

    __slots__ = (
        "_config",
        "_errors",
        "_generated_keys",
        "_ledger",
        "_resolver",
        "_result_sets",
        "_update_counts",
    )

    def __init__(self, config: Optional[MatchConfig] = None) -> None:
        self._config = config if config is not None else MatchConfig()
        self._resolver = ResponseResolver(self._config)
        self._result_sets: StatementRegistry[tuple[Any, ...]] = StatementRegistry(ResponseCategory.RESULT_SETS)
        self._update_counts: StatementRegistry[tuple[int, ...]] = StatementRegistry(ResponseCategory.UPDATE_COUNTS)
        self._errors: StatementRegistry[BaseException] = StatementRegistry(ResponseCategory.ERROR)
        self._generated_keys: StatementRegistry[Any] = StatementRegistry(ResponseCategory.GENERATED_KEYS)
        self._ledger = InvocationLedger()

    # Configuration

    @property
    def config(self) -> MatchConfig:
        return self._config

    def set_case_sensitive(self, case_sensitive: bool) -> None:
        self._config.set_case_sensitive(case_sensitive)

    def set_exact_match(self, exact_match: bool) -> None:
        self._config.set_exact_match(exact_match)

    def set_use_regular_expressions(self, use_regular_expressions: bool) -> None:
        self._config.set_use_regular_expressions(use_regular_expressions)

    def set_exact_match_parameter(self, exact_match_parameter: bool) -> None:
        self._config.set_exact_match_parameter(exact_match_parameter)

    # Result sets

    def prepare_result_set(self, sql: str, result_set: Any, parameters: StatementParameters = None) -> None:
        """Return ``result_set`` when ``sql`` executes with matching parameters."""
        if result_set is None:
            msg = "A result set is required"
            raise RegistrationError(msg, sql=sql)
        self._result_sets.register(sql, (result_set,), create_parameter_binding(parameters))

    def prepare_result_sets(self, sql: str, result_sets: "Sequence[Any]", parameters: StatementParameters = None) -> None:
        """Return several result sets, in order, when ``sql`` executes with matching parameters."""
        payload = _copy_payload_sequence(sql, result_sets, "result sets")
        if any(result_set is None for result_set in payload):
            msg = "Result sets must not contain None"
            raise RegistrationError(msg, sql=sql)
        self._result_sets.register(sql, payload, create_parameter_binding(parameters))

    def get_result_sets(self, sql: str, parameters: StatementParameters = None) -> "Optional[tuple[Any, ...]]":
        return self._resolve(self._result_sets, sql, parameters)

    def get_result_set(self, sql: str, parameters: StatementParameters = None) -> Optional[Any]:
        """First prepared result set for the execution, or None."""
        result_sets = self.get_result_sets(sql, parameters)
        return result_sets[0] if result_sets else None

    def has_multiple_result_sets(self, sql: str, parameters: StatementParameters = None) -> bool:
        result_sets = self.get_result_sets(sql, parameters)
        return result_sets is not None and len(result_sets) > 1

    def clear_result_sets(self) -> None:
        self._result_sets.clear()

    # Update counts

    def prepare_update_count(self, sql: str, update_count: int, parameters: StatementParameters = None) -> None:
        """Return ``update_count`` when ``sql`` executes with matching parameters."""
        _validate_update_count(sql, update_count)
        self._update_counts.register(sql, (update_count,), create_parameter_binding(parameters))

    def prepare_update_counts(
        self, sql: str, update_counts: "Sequence[int]", parameters: StatementParameters = None
    ) -> None:
        """Return several update counts (a batch) when ``sql`` executes with matching parameters."""
        payload = _copy_payload_sequence(sql, update_counts, "update counts")
        for update_count in payload:
            _validate_update_count(sql, update_count)
        self._update_counts.register(sql, payload, create_parameter_binding(parameters))

    def get_update_counts(self, sql: str, parameters: StatementParameters = None) -> "Optional[tuple[int, ...]]":
        return self._resolve(self._update_counts, sql, parameters)

    def get_update_count(self, sql: str, parameters: StatementParameters = None) -> Optional[int]:
        """First prepared update count for the execution, or None."""
        update_counts = self.get_update_counts(sql, parameters)
        return update_counts[0] if update_counts else None

    def has_multiple_update_counts(self, sql: str, parameters: StatementParameters = None) -> bool:
        update_counts = self.get_update_counts(sql, parameters)
        return update_counts is not None and len(update_counts) > 1

    def clear_update_counts(self) -> None:
        self._update_counts.clear()

    # Simulated errors

    def prepare_throws_error(
        self, sql: str, error: Optional[BaseException] = None, parameters: StatementParameters = None
    ) -> None:
        """Make ``sql`` fail when it executes with matching parameters.

        Args:
            sql: Statement text
            error: Exception handed to the driver layer; defaults to a
                :class:`SimulatedSQLError` naming the statement.
            parameters: Parameters the failure applies to

        Raises:
            RegistrationError: If ``error`` is not an exception instance
        """
        if error is None:
            error = SimulatedSQLError(sql=sql)
        elif not isinstance(error, BaseException):
            msg = f"Expected an exception instance, got {type(error).__name__!r}"
            raise RegistrationError(msg, sql=sql)
        self._errors.register(sql, error, create_parameter_binding(parameters))

    def get_error(self, sql: str, parameters: StatementParameters = None) -> Optional[BaseException]:
        """Prepared exception for the execution, or None.

        The exception is returned, not raised.
        """
        return self._resolve(self._errors, sql, parameters)

    def throws_error(self, sql: str, parameters: StatementParameters = None) -> bool:
        return self.get_error(sql, parameters) is not None

    def clear_errors(self) -> None:
        self._errors.clear()

    # Generated keys

    def prepare_generated_keys(self, sql: str, generated_keys: Any, parameters: StatementParameters = None) -> None:
        """Return ``generated_keys`` as the generated-keys result of matching executions."""
        self._generated_keys.register(sql, generated_keys, create_parameter_binding(parameters))

    def get_generated_keys(self, sql: str, parameters: StatementParameters = None) -> Optional[Any]:
        return self._resolve(self._generated_keys, sql, parameters)

    def clear_generated_keys(self) -> None:
        self._generated_keys.clear()

    # Execution history

    def record_execution(self, sql: str, parameters: StatementParameters = None) -> None:
        """Record one execution of ``sql``, whether or not a response was prepared for it."""
        self._ledger.record(sql, parameters)

    def get_execution_history(self, sql: str) -> Optional[ParameterSets]:
        """Parameter sets of every execution of exactly ``sql``, or None if it never executed."""
        return self._ledger.query(sql)

    def get_all_execution_history(self) -> "Mapping[str, ParameterSets]":
        return self._ledger.view()

    def get_executed_statements(self) -> "list[str]":
        return self._ledger.executed_statements()

    def clear_execution_history(self) -> None:
        self._ledger.clear()

    def _resolve(self, registry: "StatementRegistry[Any]", sql: str, parameters: StatementParameters) -> Any:
        actual = create_parameter_binding(parameters, validate_keys=False)
        return self._resolver.resolve_payload(registry, sql, actual)

    def __repr__(self) -> str:
        return (
            f"ParameterResultSetHandler(config={self._config!r}, "
            f"result_sets={len(self._result_sets)}, update_counts={len(self._update_counts)}, "
            f"errors={len(self._errors)}, generated_keys={len(self._generated_keys)}, "
            f"executed={len(self._ledger)})"
        )


def _copy_payload_sequence(sql: str, values: Any, description: str) -> "tuple[Any, ...]":
    if isinstance(values, (str, bytes, bytearray)) or not isinstance(values, Sequence):
        msg = f"Expected a sequence of {description}, got {type(values).__name__!r}"
        raise RegistrationError(msg, sql=sql)
    if not values:
        msg = f"At least one entry is required for {description}"
        raise RegistrationError(msg, sql=sql)
    return tuple(values)


def _validate_update_count(sql: str, update_count: Any) -> None:
    if isinstance(update_count, bool) or not isinstance(update_count, int):
        msg = f"Update counts must be integers, got {update_count!r}"
        raise RegistrationError(msg, sql=sql)
