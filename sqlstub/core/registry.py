"""Ordered storage of stub responses keyed by statement text.

One generic :class:`StatementRegistry` is instantiated per response category,
so the matching logic exists once regardless of the payload type.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Generic

from mypy_extensions import mypyc_attr

from sqlstub.core.parameters import ParameterBinding
from sqlstub.exceptions import RegistrationError
from sqlstub.typing import PayloadT
from sqlstub.utils.logging import get_logger

__all__ = ("ResponseCategory", "ResponseEntry", "StatementRegistry")

logger = get_logger("sqlstub.core.registry")


class ResponseCategory(str, Enum):
    """Kinds of stub responses a statement can be prepared with."""

    RESULT_SETS = "result_sets"
    UPDATE_COUNTS = "update_counts"
    ERROR = "error"
    GENERATED_KEYS = "generated_keys"


@mypyc_attr(allow_interpreted_subclasses=False)
class ResponseEntry(Generic[PayloadT]):
    """A registered payload tied to the parameter binding it answers.

    Attributes:
        parameters: Binding the actual parameters are compared against
        payload: The canned response
        category: Which registry the entry belongs to
    """

    __slots__ = ("category", "parameters", "payload")

    def __init__(self, parameters: ParameterBinding, payload: PayloadT, category: ResponseCategory) -> None:
        self.parameters = parameters
        self.payload = payload
        self.category = category

    def __repr__(self) -> str:
        return f"ResponseEntry(category={self.category.value}, parameters={self.parameters!r}, payload={self.payload!r})"


@mypyc_attr(allow_interpreted_subclasses=False)
class StatementRegistry(Generic[PayloadT]):
    """Per-category mapping of statement text to entries in registration order.

    Statement keys are stored verbatim and iterate in the order they were
    first registered. Registration only ever appends; :meth:`clear` is the
    single way to drop entries.
    """

    __slots__ = ("_entries", "category")

    def __init__(self, category: ResponseCategory) -> None:
        self.category = category
        self._entries: dict[str, list[ResponseEntry[PayloadT]]] = {}

    def register(self, sql: str, payload: PayloadT, parameters: ParameterBinding) -> ResponseEntry[PayloadT]:
        """Append an entry for ``sql``.

        Args:
            sql: Statement text, stored verbatim
            payload: The canned response
            parameters: Binding snapshot the entry answers

        Raises:
            RegistrationError: If the statement or payload is missing

        Returns:
            The stored entry
        """
        if not isinstance(sql, str) or not sql:
            msg = f"Statement must be a non-empty string, got {sql!r}"
            raise RegistrationError(msg)
        if payload is None:
            msg = f"A {self.category.value} payload is required"
            raise RegistrationError(msg, sql=sql)
        entry = ResponseEntry(parameters, payload, self.category)
        self._entries.setdefault(sql, []).append(entry)
        logger.debug(
            "Registered %s response for %r (entry %d)", self.category.value, sql, len(self._entries[sql])
        )
        return entry

    def entries_for(self, sql: str) -> "tuple[ResponseEntry[PayloadT], ...]":
        """Entries registered under exactly ``sql``, in registration order."""
        return tuple(self._entries.get(sql, ()))

    def keys(self) -> "list[str]":
        """Registered statement keys in first-registration order."""
        return list(self._entries)

    def clear(self) -> None:
        """Drop every entry of this category."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug("Cleared %d %s statement(s)", count, self.category.value)

    def __contains__(self, sql: object) -> bool:
        return sql in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StatementRegistry(category={self.category.value}, statements={len(self._entries)})"
