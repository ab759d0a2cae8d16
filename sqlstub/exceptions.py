from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "RegistrationError",
    "SQLStubError",
    "SimulatedSQLError",
)


class SQLStubError(Exception):
    """Base exception class from which all sqlstub exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLStubError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SQLStubError):
    """Improper configuration error.

    This exception is raised when a match configuration value cannot be interpreted.
    """


class RegistrationError(SQLStubError, ValueError):
    """A stub response was registered with structurally invalid input.

    Raised at the call site, since it points at a mistake in the test setup
    rather than at a runtime mismatch.
    """

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Invalid stub registration."
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class SimulatedSQLError(SQLStubError):
    """Default failure descriptor for statements prepared to throw.

    The handler hands it back as data; raising it is up to the fake driver layer.
    """

    sql: Optional[str]

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = f"Statement {sql} was specified to throw an exception" if sql else "Simulated SQL error."
        super().__init__(message)
        self.sql = sql
