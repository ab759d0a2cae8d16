"""First-match selection of registered responses."""

from collections.abc import Mapping
from typing import Any, Optional

from mypy_extensions import mypyc_attr

from sqlstub.config import MatchConfig
from sqlstub.core.matcher import StatementMatcher
from sqlstub.core.parameters import get_parameter_strategy
from sqlstub.core.registry import ResponseEntry, StatementRegistry
from sqlstub.typing import ParameterKey, PayloadT
from sqlstub.utils.logging import get_logger

__all__ = ("ResponseResolver",)

logger = get_logger("sqlstub.core.resolver")


@mypyc_attr(allow_interpreted_subclasses=False)
class ResponseResolver:
    """Pick the first registered entry answering a statement execution.

    Every matching statement key is visited in sorted order and, within a
    key, every entry in registration order. The first entry whose parameters
    satisfy the active strategy wins. Resolution never mutates the registry
    and a miss is reported as ``None``.
    """

    __slots__ = ("_config", "_matcher")

    def __init__(self, config: MatchConfig) -> None:
        self._config = config
        self._matcher = StatementMatcher(config)

    @property
    def matcher(self) -> StatementMatcher:
        return self._matcher

    def resolve(
        self, registry: "StatementRegistry[PayloadT]", sql: str, parameters: "Mapping[ParameterKey, Any]"
    ) -> "Optional[ResponseEntry[PayloadT]]":
        """Find the entry answering ``sql`` executed with ``parameters``.

        Args:
            registry: Registry of one response category
            sql: Executed statement text
            parameters: Actual parameter binding

        Returns:
            The first matching entry, or None
        """
        strategy = get_parameter_strategy(self._config.exact_match_parameter)
        for key in self._matcher.resolve_keys(sql, sorted(registry.keys())):
            for entry in registry.entries_for(key):
                if strategy.matches(entry.parameters, parameters):
                    logger.debug(
                        "Resolved %s for %r via key %r using %s parameter matching",
                        registry.category.value,
                        sql,
                        key,
                        strategy.name,
                    )
                    return entry
        logger.debug("No %s registered for %r", registry.category.value, sql)
        return None

    def resolve_payload(
        self, registry: "StatementRegistry[PayloadT]", sql: str, parameters: "Mapping[ParameterKey, Any]"
    ) -> "Optional[PayloadT]":
        """Like :meth:`resolve` but return the payload only."""
        entry = self.resolve(registry, sql, parameters)
        return entry.payload if entry is not None else None
