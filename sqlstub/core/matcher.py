"""Statement text matching.

Resolves an executed statement to the registry keys that count as "the same
statement" under the active :class:`~sqlstub.config.MatchConfig`.
"""

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Optional

from mypy_extensions import mypyc_attr

from sqlstub.config import MatchConfig
from sqlstub.utils.logging import get_logger

__all__ = ("StatementMatcher",)

logger = get_logger("sqlstub.core.matcher")


@lru_cache(maxsize=512)
def _compile_pattern(pattern: str, case_sensitive: bool) -> "Optional[re.Pattern[str]]":
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        logger.warning("Registered statement %r is not a valid regular expression: %s", pattern, exc)
        return None


@mypyc_attr(allow_interpreted_subclasses=False)
class StatementMatcher:
    """Match executed statements against registered statement keys.

    Modes, in order of precedence:
    - regular expressions: the key is a pattern that must match the whole statement
    - exact: the key must equal the statement
    - substring: either text contains the other, so an empty statement
      matches every key

    Case is folded for every mode unless ``case_sensitive`` is set.
    """

    __slots__ = ("_config",)

    def __init__(self, config: MatchConfig) -> None:
        self._config = config

    @property
    def config(self) -> MatchConfig:
        return self._config

    def matches(self, statement: str, key: str) -> bool:
        """Check whether a single registry key matches the statement."""
        config = self._config
        if config.use_regular_expressions:
            pattern = _compile_pattern(key, config.case_sensitive)
            return pattern is not None and pattern.fullmatch(statement) is not None
        if not config.case_sensitive:
            statement = statement.casefold()
            key = key.casefold()
        if config.exact_match:
            return statement == key
        return key in statement or statement in key

    def resolve_keys(self, statement: str, keys: Iterable[str]) -> "list[str]":
        """Return every key matching ``statement``, keeping the order of ``keys``.

        Args:
            statement: Statement text supplied at execution
            keys: Registered statement keys

        Returns:
            Matching keys, possibly empty
        """
        return [key for key in keys if self.matches(statement, key)]
