from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "ParameterError",
    "ParameterShapeError",
    "SQLExpandError",
)


class SQLExpandError(Exception):
    """Base exception class from which all sqlexpand exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLExpandError``.

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


class ImproperConfigurationError(SQLExpandError):
    """Improper Configuration error.

    Raised when an expansion setting cannot be honoured.
    """


# -- SQL Parameter Errors --
class ParameterError(SQLExpandError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ParameterShapeError(ParameterError):
    """Raised when a bracketed placeholder is bound to a value that is not a sequence.

    The literal placeholder text (``[?]`` or ``[:name]``) is kept on the
    ``placeholder`` attribute so callers can locate the offending token.
    """

    placeholder: str

    def __init__(self, placeholder: str, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = f"Found {placeholder} in query, but parameter is not an array"
        super().__init__(message, sql)
        self.placeholder = placeholder
