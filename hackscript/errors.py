from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Diagnostic:
    """A compile-time message produced by the parser or the type checker."""
    line: int
    column: int
    message: str
    severity: str = 'error'  # 'error', 'warning' or 'info'

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.severity}: {self.message}"


class HackScriptError(Exception):
    """Exception type used to propagate HackScript runtime errors."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(Exception):
    """Raised by the parser on an expected-token mismatch."""
    def __init__(self, message: str, line: int = 0, column: int = 0, token: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.token = token


class ReturnSignal(Exception):
    """Internal exception to handle return statements in functions."""
    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value
