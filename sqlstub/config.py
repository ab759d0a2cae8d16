"""Match configuration for the stub handler.

The configuration is owned by one handler instance, stays mutable for the
handler's lifetime and is read at lookup time, so toggling a flag changes how
later lookups behave without touching results that were already returned.

Environment variables (see :func:`load_match_config_from_env`):
- SQLSTUB_CASE_SENSITIVE
- SQLSTUB_EXACT_MATCH
- SQLSTUB_USE_REGULAR_EXPRESSIONS
- SQLSTUB_EXACT_MATCH_PARAMETER
"""

import os
from typing import Any, Final, Optional

from mypy_extensions import mypyc_attr

from sqlstub.exceptions import ImproperConfigurationError
from sqlstub.utils.logging import get_logger

__all__ = ("MatchConfig", "load_match_config_from_env")

logger = get_logger("sqlstub.config")

_TRUE_VALUES: Final = frozenset(("true", "1", "yes", "on", "enabled"))
_FALSE_VALUES: Final = frozenset(("false", "0", "no", "off", "disabled", ""))


@mypyc_attr(allow_interpreted_subclasses=False)
class MatchConfig:
    """Flags controlling how statements and parameters are matched.

    Args:
        case_sensitive: Compare statement text case-sensitively.
        exact_match: Require the statement to equal a registered key verbatim
            instead of substring containment.
        use_regular_expressions: Treat registered keys as regular expressions
            that must match the whole statement.
        exact_match_parameter: Require identical parameter key sets instead of
            accepting extra actual parameters.
    """

    __slots__ = ("case_sensitive", "exact_match", "exact_match_parameter", "use_regular_expressions")

    def __init__(
        self,
        case_sensitive: bool = False,
        exact_match: bool = False,
        use_regular_expressions: bool = False,
        exact_match_parameter: bool = False,
    ) -> None:
        self.case_sensitive = case_sensitive
        self.exact_match = exact_match
        self.use_regular_expressions = use_regular_expressions
        self.exact_match_parameter = exact_match_parameter

    def set_case_sensitive(self, case_sensitive: bool) -> None:
        self.case_sensitive = bool(case_sensitive)

    def set_exact_match(self, exact_match: bool) -> None:
        self.exact_match = bool(exact_match)

    def set_use_regular_expressions(self, use_regular_expressions: bool) -> None:
        self.use_regular_expressions = bool(use_regular_expressions)

    def set_exact_match_parameter(self, exact_match_parameter: bool) -> None:
        self.exact_match_parameter = bool(exact_match_parameter)

    def replace(self, **kwargs: Any) -> "MatchConfig":
        """Create a copy with the given flags changed.

        Args:
            **kwargs: Flag values to override

        Raises:
            TypeError: If an unknown flag name is supplied

        Returns:
            New MatchConfig instance
        """
        unknown = set(kwargs) - set(self.__slots__)
        if unknown:
            msg = f"Unknown match configuration flags: {', '.join(sorted(unknown))}"
            raise TypeError(msg)
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(kwargs)
        return MatchConfig(**values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatchConfig):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"MatchConfig("
            f"case_sensitive={self.case_sensitive!r}, "
            f"exact_match={self.exact_match!r}, "
            f"use_regular_expressions={self.use_regular_expressions!r}, "
            f"exact_match_parameter={self.exact_match_parameter!r})"
        )


def load_match_config_from_env(base: Optional[MatchConfig] = None) -> MatchConfig:
    """Load match flags from environment variables.

    Unset variables keep the value from ``base`` (or the defaults).

    Args:
        base: Configuration supplying values for unset variables

    Returns:
        MatchConfig loaded from environment variables
    """
    base = base or MatchConfig()
    config = MatchConfig(
        case_sensitive=_env_bool("SQLSTUB_CASE_SENSITIVE", base.case_sensitive),
        exact_match=_env_bool("SQLSTUB_EXACT_MATCH", base.exact_match),
        use_regular_expressions=_env_bool("SQLSTUB_USE_REGULAR_EXPRESSIONS", base.use_regular_expressions),
        exact_match_parameter=_env_bool("SQLSTUB_EXACT_MATCH_PARAMETER", base.exact_match_parameter),
    )
    logger.debug("Loaded match configuration from environment: %r", config)
    return config


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    msg = f"Invalid boolean value for {key}: {value!r}"
    raise ImproperConfigurationError(msg)
