"""Tests for ParameterResultSetHandler, the public stub API."""

from typing import Any
from unittest.mock import Mock

import pytest

from sqlstub import MatchConfig, ParameterResultSetHandler
from sqlstub.exceptions import RegistrationError, SimulatedSQLError


@pytest.fixture
def result_set() -> Mock:
    return Mock(name="result_set")


# Registration and lookup


def test_round_trip_for_every_category(handler: ParameterResultSetHandler, result_set: Mock) -> None:
    sql = "SELECT * FROM users WHERE id = ?"
    error = RuntimeError("boom")
    keys = Mock(name="keys")

    handler.prepare_result_set(sql, result_set, [1])
    handler.prepare_update_count(sql, 3, [1])
    handler.prepare_throws_error(sql, error, [1])
    handler.prepare_generated_keys(sql, keys, [1])

    assert handler.get_result_set(sql, [1]) is result_set
    assert handler.get_update_count(sql, [1]) == 3
    assert handler.get_error(sql, [1]) is error
    assert handler.get_generated_keys(sql, [1]) is keys


@pytest.mark.parametrize(
    "parameters",
    [["a", 2], ("a", 2), {1: "a", 2: 2}],
    ids=["list", "tuple", "mapping"],
)
def test_parameter_shapes_are_interchangeable(handler: ParameterResultSetHandler, parameters: Any) -> None:
    handler.prepare_update_count("UPDATE t SET a = ? WHERE b = ?", 1, parameters)

    assert handler.get_update_count("UPDATE t SET a = ? WHERE b = ?", ["a", 2]) == 1
    assert handler.get_update_count("UPDATE t SET a = ? WHERE b = ?", {1: "a", 2: 2}) == 1


def test_named_parameters_for_callable_statements(handler: ParameterResultSetHandler, result_set: Mock) -> None:
    handler.prepare_result_set("{call get_orders(?)}", result_set, {"customer": "ACME"})

    assert handler.get_result_set("{call get_orders(?)}", {"customer": "ACME", "limit": 10}) is result_set
    assert handler.get_result_set("{call get_orders(?)}", {"customer": "Other"}) is None


def test_registration_order_tie_break(handler: ParameterResultSetHandler) -> None:
    first, second = Mock(name="first"), Mock(name="second")
    handler.prepare_result_set("SELECT 1", first, ["p"])
    handler.prepare_result_set("SELECT 1", second, ["p"])

    assert handler.get_result_set("SELECT 1", ["p"]) is first


def test_sorted_key_order_beats_registration_order(handler: ParameterResultSetHandler) -> None:
    handler.prepare_result_set("SELECT", "select-key")
    handler.prepare_result_set("FROM orders", "from-key")

    assert handler.get_result_set("SELECT * FROM orders") == "from-key"


def test_no_registration_returns_none(handler: ParameterResultSetHandler) -> None:
    assert handler.get_result_set("SELECT 1") is None
    assert handler.get_result_sets("SELECT 1") is None
    assert handler.get_update_count("SELECT 1") is None
    assert handler.get_update_counts("SELECT 1") is None
    assert handler.get_error("SELECT 1") is None
    assert handler.get_generated_keys("SELECT 1") is None
    assert not handler.throws_error("SELECT 1")
    assert not handler.has_multiple_result_sets("SELECT 1")
    assert not handler.has_multiple_update_counts("SELECT 1")


def test_registration_without_parameters_answers_any_parameters(handler: ParameterResultSetHandler) -> None:
    handler.prepare_update_count("DELETE FROM t", 4)

    assert handler.get_update_count("DELETE FROM t") == 4
    assert handler.get_update_count("DELETE FROM t WHERE id = ?", [12]) == 4


def test_caller_mutation_after_registration_is_ignored(handler: ParameterResultSetHandler) -> None:
    parameters: dict[Any, Any] = {1: "a"}
    handler.prepare_update_count("UPDATE t", 1, parameters)
    parameters[1] = "b"

    assert handler.get_update_count("UPDATE t", {1: "a"}) == 1
    assert handler.get_update_count("UPDATE t", {1: "b"}) is None


def test_caller_mutation_of_payload_arrays_is_ignored(handler: ParameterResultSetHandler) -> None:
    counts = [1, 2]
    handler.prepare_update_counts("UPDATE t", counts)
    counts.append(3)

    assert handler.get_update_counts("UPDATE t") == (1, 2)


# Matching modes


@pytest.mark.parametrize(("case_sensitive", "matches"), [(False, True), (True, False)])
def test_statement_case_sensitivity(
    handler: ParameterResultSetHandler, result_set: Mock, case_sensitive: bool, matches: bool
) -> None:
    handler.set_case_sensitive(case_sensitive)
    handler.prepare_result_set("SELECT * FROM t", result_set)

    assert (handler.get_result_set("select * from t") is result_set) is matches


def test_substring_mode(handler: ParameterResultSetHandler, result_set: Mock) -> None:
    handler.prepare_result_set("FROM orders", result_set)
    sql = "SELECT * FROM orders WHERE id=?"

    assert handler.get_result_set(sql, [1]) is result_set

    handler.set_exact_match(True)
    assert handler.get_result_set(sql, [1]) is None
    assert handler.get_result_set("FROM orders", [1]) is result_set


def test_regular_expression_mode(handler: ParameterResultSetHandler) -> None:
    handler.set_use_regular_expressions(True)
    handler.prepare_update_count(r"UPDATE orders SET status = \? WHERE id = \d+", 1)

    assert handler.get_update_count("UPDATE orders SET status = ? WHERE id = 42") == 1
    assert handler.get_update_count("UPDATE orders SET status = ? WHERE id = x") is None


def test_exact_parameter_mode_rejects_supersets(handler: ParameterResultSetHandler) -> None:
    handler.prepare_update_count("UPDATE t", 1, {1: "a"})

    assert handler.get_update_count("UPDATE t", {1: "a", 2: "b"}) == 1

    handler.set_exact_match_parameter(True)
    assert handler.get_update_count("UPDATE t", {1: "a", 2: "b"}) is None
    assert handler.get_update_count("UPDATE t", {1: "a"}) == 1


def test_config_changes_affect_only_later_lookups(handler: ParameterResultSetHandler) -> None:
    handler.prepare_update_count("FROM t", 5)
    before = handler.get_update_count("SELECT * FROM t")

    handler.set_exact_match(True)

    assert before == 5
    assert handler.get_update_count("SELECT * FROM t") is None


def test_setters_update_shared_config() -> None:
    config = MatchConfig()
    handler = ParameterResultSetHandler(config)
    handler.set_case_sensitive(True)
    handler.set_exact_match(True)
    handler.set_use_regular_expressions(True)
    handler.set_exact_match_parameter(True)

    assert handler.config is config
    assert config == MatchConfig(True, True, True, True)


def test_default_config_is_lenient() -> None:
    assert ParameterResultSetHandler().config == MatchConfig(
        case_sensitive=False, exact_match=False, use_regular_expressions=False, exact_match_parameter=False
    )


# Multiplicity


def test_multiple_update_counts(handler: ParameterResultSetHandler) -> None:
    handler.prepare_update_counts("UPDATE batch", [1, 2, 3], ["x"])
    handler.prepare_update_count("UPDATE single", 1, ["x"])

    assert handler.has_multiple_update_counts("UPDATE batch", ["x"])
    assert handler.get_update_counts("UPDATE batch", ["x"]) == (1, 2, 3)
    assert handler.get_update_count("UPDATE batch", ["x"]) == 1
    assert not handler.has_multiple_update_counts("UPDATE single", ["x"])


def test_multiple_result_sets(handler: ParameterResultSetHandler) -> None:
    first, second = Mock(name="first"), Mock(name="second")
    handler.prepare_result_sets("{call multi()}", [first, second])
    handler.prepare_result_sets("{call single()}", [first])

    assert handler.has_multiple_result_sets("{call multi()}")
    assert handler.get_result_sets("{call multi()}") == (first, second)
    assert handler.get_result_set("{call multi()}") is first
    assert not handler.has_multiple_result_sets("{call single()}")


# Simulated errors


def test_prepare_throws_error_default_descriptor(handler: ParameterResultSetHandler) -> None:
    handler.prepare_throws_error("DELETE FROM users", parameters=[1])

    error = handler.get_error("DELETE FROM users", [1])
    assert isinstance(error, SimulatedSQLError)
    assert error.sql == "DELETE FROM users"
    assert "DELETE FROM users" in str(error)
    assert handler.throws_error("DELETE FROM users", [1])
    assert not handler.throws_error("DELETE FROM users", [2])


def test_prepare_throws_error_rejects_non_exceptions(handler: ParameterResultSetHandler) -> None:
    with pytest.raises(RegistrationError, match="exception instance"):
        handler.prepare_throws_error("DELETE FROM users", "boom")  # type: ignore[arg-type]


# Clearing


def test_clear_is_per_category(handler: ParameterResultSetHandler, result_set: Mock) -> None:
    handler.prepare_result_set("SELECT 1", result_set)
    handler.prepare_update_count("SELECT 1", 1)
    handler.prepare_throws_error("SELECT 1")
    handler.prepare_generated_keys("SELECT 1", result_set)

    handler.clear_result_sets()
    assert handler.get_result_set("SELECT 1") is None
    assert handler.get_update_count("SELECT 1") == 1

    handler.clear_update_counts()
    assert handler.get_update_count("SELECT 1") is None
    assert handler.throws_error("SELECT 1")

    handler.clear_errors()
    assert not handler.throws_error("SELECT 1")
    assert handler.get_generated_keys("SELECT 1") is result_set

    handler.clear_generated_keys()
    assert handler.get_generated_keys("SELECT 1") is None


def test_registration_after_clear(handler: ParameterResultSetHandler) -> None:
    handler.prepare_update_count("UPDATE t", 1)
    handler.clear_update_counts()
    handler.clear_update_counts()
    handler.prepare_update_count("UPDATE t", 2)

    assert handler.get_update_count("UPDATE t") == 2


# Malformed registration


@pytest.mark.parametrize(
    ("method", "payload"),
    [
        ("prepare_result_set", None),
        ("prepare_result_sets", []),
        ("prepare_result_sets", [None]),
        ("prepare_result_sets", "not a sequence"),
        ("prepare_update_count", "1"),
        ("prepare_update_count", True),
        ("prepare_update_count", 1.5),
        ("prepare_update_counts", []),
        ("prepare_update_counts", [1, "2"]),
        ("prepare_update_counts", 3),
        ("prepare_generated_keys", None),
    ],
)
def test_malformed_registration_fails_fast(handler: ParameterResultSetHandler, method: str, payload: Any) -> None:
    with pytest.raises(RegistrationError):
        getattr(handler, method)("SELECT 1", payload)


def test_malformed_parameters_fail_fast(handler: ParameterResultSetHandler) -> None:
    with pytest.raises(RegistrationError):
        handler.prepare_update_count("UPDATE t", 1, {0: "zero-based"})
    with pytest.raises(RegistrationError):
        handler.prepare_update_count("UPDATE t", 1, "a")  # type: ignore[arg-type]


def test_empty_statement_is_rejected(handler: ParameterResultSetHandler) -> None:
    with pytest.raises(RegistrationError):
        handler.prepare_update_count("", 1)


# Execution history


def test_ledger_records_matched_and_unmatched_executions(handler: ParameterResultSetHandler) -> None:
    handler.prepare_update_count("UPDATE t SET a = ?", 1, ["x"])
    executions = [["x"], ["y"], ["x"]]
    for parameters in executions:
        handler.get_update_count("UPDATE t SET a = ?", parameters)
        handler.record_execution("UPDATE t SET a = ?", parameters)

    history = handler.get_execution_history("UPDATE t SET a = ?")
    assert history is not None
    assert len(history) == 3
    assert [binding[1] for binding in history] == ["x", "y", "x"]


def test_record_execution_accepts_generators(handler: ParameterResultSetHandler) -> None:
    handler.record_execution("SELECT 1", iter([1, 2]))
    handler.record_execution("SELECT 1", (value * 10 for value in (1, 2)))

    history = handler.get_execution_history("SELECT 1")
    assert history is not None
    assert [binding.to_dict() for binding in history] == [{1: 1, 2: 2}, {1: 10, 2: 20}]


def test_execution_history_for_unknown_statement(handler: ParameterResultSetHandler) -> None:
    assert handler.get_execution_history("SELECT never") is None


def test_all_execution_history(handler: ParameterResultSetHandler) -> None:
    handler.record_execution("SELECT 2")
    handler.record_execution("SELECT 1", [1])

    history = handler.get_all_execution_history()
    assert set(history) == {"SELECT 1", "SELECT 2"}
    assert handler.get_executed_statements() == ["SELECT 1", "SELECT 2"]
    with pytest.raises(TypeError):
        history["SELECT 3"] = history["SELECT 1"]  # type: ignore[index]


def test_recording_does_not_touch_registries(handler: ParameterResultSetHandler) -> None:
    handler.record_execution("UPDATE t", [1])
    assert handler.get_update_count("UPDATE t", [1]) is None


def test_clear_execution_history(handler: ParameterResultSetHandler) -> None:
    handler.record_execution("SELECT 1")
    handler.prepare_update_count("SELECT 1", 1)
    handler.clear_execution_history()

    assert handler.get_execution_history("SELECT 1") is None
    assert handler.get_update_count("SELECT 1") == 1


def test_repr_summarises_state(handler: ParameterResultSetHandler) -> None:
    handler.prepare_update_count("SELECT 1", 1)
    handler.record_execution("SELECT 1")
    assert "update_counts=1" in repr(handler)
    assert "executed=1" in repr(handler)
