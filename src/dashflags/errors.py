"""
Errors raised and returned by the dashflags parser.

Parsing failures are exceptions so callers can handle them where they see fit;
the safe entry points wrap the same exceptions into `result.Err` values.

Exception Hierarchy:
- FlagError
    ├── ParseError
    │   ├── MissingArgument
    │   ├── MissingValue
    │   └── UnknownFlag
    ├── ExitRequested
    └── AlreadyFinalized

`FlagUnset` and `InvalidValue` are not exceptions: they are the error values
carried by `FlagParser.lookup` when a flag has no usable value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FlagError(Exception):
    """Base class for every error raised by dashflags."""


class ParseError(FlagError):
    """A recoverable failure while parsing the argument list."""

    def __init__(self, flag: str, message: str) -> None:
        super().__init__(message)
        self.flag = flag


class MissingArgument(ParseError):
    """A required flag did not receive a value."""

    def __init__(self, flag: str) -> None:
        super().__init__(flag, f"argument '{flag}' is required")


class MissingValue(ParseError):
    """A value flag was the last token, with nothing left to use as its value."""

    def __init__(self, flag: str) -> None:
        super().__init__(flag, f"argument '{flag}' requires a value")


class UnknownFlag(ParseError):
    """An undeclared flag was given while the parser runs in strict mode."""

    def __init__(self, flag: str) -> None:
        super().__init__(flag, f"unknown flag '-{flag}'")


class ExitReason(Enum):
    """Why the parser asks the program to stop."""

    HELP = "help"
    UNKNOWN_FLAG = "unknown_flag"
    NO_ARGUMENTS = "no_arguments"


class ExitRequested(FlagError):
    """
    The argument list asks the program to terminate instead of running.

    Raised for `-help`, for an empty argument list and, outside strict mode,
    for undeclared flags. `message` is the text to show the user, if any.
    """

    def __init__(
        self, reason: ExitReason, code: int = 0, message: Optional[str] = None
    ) -> None:
        super().__init__(f"exit requested ({reason.value}) with status {code}")
        self.reason = reason
        self.code = code
        self.message = message


class AlreadyFinalized(FlagError):
    """finalize() was called on a parser that has already consumed its arguments."""

    def __init__(self) -> None:
        super().__init__("parser has already been finalized")


@dataclass(frozen=True)
class FlagUnset:
    """The flag is not declared or holds no value."""

    flag: str

    def __str__(self) -> str:
        return f"flag '{self.flag}' has no value"


@dataclass(frozen=True)
class InvalidValue:
    """The flag holds text that could not be converted to the requested type."""

    flag: str
    text: str
    type_name: str

    def __str__(self) -> str:
        return f"flag '{self.flag}' value {self.text!r} is not a valid {self.type_name}"
