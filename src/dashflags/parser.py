"""
dashflags - imperative single-dash command-line flag parsing.

This module provides a small flag parser where flags are declared one call at a
time instead of being described up front. Boolean flags default to false and
become true when present; value flags take the following token as their value
and may be required or optional. Values are stored as text and converted to the
caller's type on retrieval. Usage text is generated from the declared flags,
and flag values can also be seeded from a YAML or JSON file.

Only the `-name` form is understood: `-fd` is a single flag called `fd`, and
there is no separate `--name` syntax.
"""

import dataclasses
import json
import os
import sys
from enum import Enum
from typing import Any, Callable, Iterator, Optional, TextIO, TypeVar, Union

from result import Err, Ok, Result

from .errors import (
    AlreadyFinalized,
    ExitReason,
    ExitRequested,
    FlagError,
    FlagUnset,
    InvalidValue,
    MissingArgument,
    MissingValue,
    UnknownFlag,
)
from .logger import logger

try:
    import yaml

    HAS_YAML = True
except ImportError:
    HAS_YAML = False

T = TypeVar("T")

FLAG_PREFIX = "-"
HELP_FLAG = "help"
TRUE_TEXT = "true"
FALSE_TEXT = "false"

LookupFailure = Union[FlagUnset, InvalidValue]


def _strict_bool(value: str) -> bool:
    """
    Parse a string to a boolean value strictly.

    Only the exact strings 'true' and 'false' are accepted; anything else
    raises ValueError.
    """
    if value == TRUE_TEXT:
        return True
    elif value == FALSE_TEXT:
        return False
    else:
        raise ValueError(f"Invalid boolean value: '{value}'. Must be 'true' or 'false'")


def _type_name(value_type: Callable[[str], Any]) -> str:
    return getattr(value_type, "__name__", repr(value_type))


def _to_flag_text(name: str, kind: "FlagKind", value: Any) -> str:
    """
    Render a config file value the way it would have been typed on the command line.

    Raises ValueError for values no single command-line token could express:
    lists, mappings, and anything but true/false for a boolean flag.
    """
    if isinstance(value, (list, tuple, dict)):
        raise ValueError(
            f"Config value for flag '{name}' must be a scalar, got {type(value).__name__}: {value!r}"
        )
    if isinstance(value, bool):
        return TRUE_TEXT if value else FALSE_TEXT
    if kind is FlagKind.BOOL:
        if value in (TRUE_TEXT, FALSE_TEXT):
            return value
        raise ValueError(
            f"Config value for boolean flag '{name}' must be true or false, got {value!r}"
        )
    return str(value)


class FlagKind(Enum):
    """The two kinds of flag the parser understands."""

    BOOL = "bool"  # Present or absent, takes no value
    VALUE = "value"  # Consumes the following token


@dataclasses.dataclass
class FlagEntry:
    """A declared flag: its kind, its usage text and its current value as text."""

    kind: FlagKind
    usage: str
    value: Optional[str] = None


class FlagParser:
    """
    A command-line flag parser with imperative flag declaration.

    The first element of the argument vector is taken as the command name and
    shown in the generated help; the rest is parsed by `finalize()`.

    Example:
        parser = FlagParser.from_list(["head", "-verbose", "-num", "3", "file.txt"])
        parser.bool_flag("verbose", "this is used to get verbose output")
        parser.required_flag("num", "number of lines")

        remaining = parser.finalize()       # ["file.txt"]
        parser.get_value("verbose", bool)   # True
        parser.get_value("num", int)        # 3

    Re-declaring a flag replaces the previous declaration entirely, including
    its kind and usage text.
    """

    def __init__(self, args: list[str], strict_unknown: bool = False) -> None:
        """
        Initialize the parser from an argument vector.

        Args:
            args: The full argument vector, command name first. It is copied.
            strict_unknown: When True, an undeclared flag is a parse error
                instead of a request to exit.

        Raises:
            ValueError: If `args` is empty, since there is no command name.
        """
        if not args:
            raise ValueError("Argument vector must contain at least the command name")

        self.command: str = args[0]
        self.raw_args: list[str] = list(args[1:])
        self.flags: dict[str, FlagEntry] = {}
        self.required: list[str] = []
        self.strict_unknown: bool = strict_unknown
        self.finalized: bool = False
        self._help_fn: Optional[Callable[[], str]] = None

    @classmethod
    def from_env(cls, strict_unknown: bool = False) -> "FlagParser":
        """Initialize a parser from the process arguments in `sys.argv`."""
        return cls(list(sys.argv), strict_unknown=strict_unknown)

    @classmethod
    def from_list(cls, args: list[str], strict_unknown: bool = False) -> "FlagParser":
        """Initialize a parser from an explicit argument vector, command name first."""
        return cls(args, strict_unknown=strict_unknown)

    # Declaration

    def bool_flag(self, name: str, usage: str) -> None:
        """
        Declare a boolean flag.

        The flag reads as false until `-name` appears in the arguments.
        """
        self._declare(name, FlagEntry(FlagKind.BOOL, usage, FALSE_TEXT))

    def required_flag(self, name: str, usage: str) -> None:
        """
        Declare a flag that takes a value and must be given one.

        `finalize()` raises MissingArgument if the flag never receives a value,
        and MissingValue if `-name` is the last token.
        """
        self.required.append(name)
        self._declare(name, FlagEntry(FlagKind.VALUE, usage))

    def optional_flag(self, name: str, usage: str) -> None:
        """Declare a flag that takes a value but may be left out."""
        self._declare(name, FlagEntry(FlagKind.VALUE, usage))

    def _declare(self, name: str, entry: FlagEntry) -> None:
        if name in self.flags:
            logger.debug("Flag '%s' re-declared, replacing previous entry", name)
        else:
            logger.debug("Declared %s flag '%s'", entry.kind.value, name)
        self.flags[name] = entry

    # Retrieval

    def lookup(
        self, name: str, value_type: Callable[[str], T] = str  # type: ignore[assignment]
    ) -> Result[T, LookupFailure]:
        """
        Return the value of a flag converted with `value_type`.

        Args:
            name: The flag name, without the leading dash.
            value_type: A callable converting the stored text, such as int,
                float or pathlib.Path. bool accepts only 'true' and 'false'.

        Returns:
            Result[T, LookupFailure]:
                - Ok with the converted value,
                - Err(FlagUnset) if the flag is not declared or has no value,
                - Err(InvalidValue) if the text could not be converted.
        """
        entry = self.flags.get(name)
        if entry is None or entry.value is None:
            return Err(FlagUnset(name))

        converter: Callable[[str], Any] = _strict_bool if value_type is bool else value_type
        try:
            return Ok(converter(entry.value))
        except (ValueError, TypeError, ArithmeticError):
            return Err(InvalidValue(name, entry.value, _type_name(value_type)))

    def get_value(
        self, name: str, value_type: Callable[[str], T] = str  # type: ignore[assignment]
    ) -> Optional[T]:
        """
        Return the value of a flag converted with `value_type`, or None.

        None covers both a flag without a value and a value that does not
        convert; use `lookup()` to tell the two apart.
        """
        return self.lookup(name, value_type).ok()

    def is_set(self, name: str) -> bool:
        """Return True if the flag is declared and currently holds a value."""
        entry = self.flags.get(name)
        return entry is not None and entry.value is not None

    # Help

    def help_flags(self) -> str:
        """
        Return the generated flag listing, sorted by flag name.

        Useful to build a custom help function with its own usage line.
        """
        parts: list[str] = []
        for name in sorted(self.flags):
            entry = self.flags[name]
            if entry.kind is FlagKind.VALUE:
                parts.append(f"  -{name} value")
            else:
                parts.append(f"  -{name}")
            parts.append(f"\t{entry.usage}")
        return "\n".join(parts) + "\n"

    def help(self) -> str:
        """
        Return the help text.

        Uses the function given to `set_help_fn()` if any, otherwise a usage
        line with the command name followed by `help_flags()`.
        """
        if self._help_fn is not None:
            return self._help_fn()
        return f"Usage: {self.command} [options...]\n{self.help_flags()}"

    def set_help_fn(self, help_fn: Callable[[], str]) -> None:
        """Replace the default help text with the output of `help_fn`."""
        self._help_fn = help_fn

    def print_help(self, file: Optional[TextIO] = None) -> None:
        """Write the help text to `file`, stderr by default."""
        print(self.help(), file=file if file is not None else sys.stderr)

    # Configuration files

    def load_config(self, config_path: str) -> None:
        """
        Seed flag values from a YAML or JSON file.

        The file holds a mapping of flag name to value. Values for undeclared
        flags are ignored, and None leaves a flag untouched. Flags given on the
        command line still win, as long as this is called before `finalize()`.

        Args:
            config_path (str): Path to the configuration file.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the file format is not supported or invalid, or a
                value does not fit its flag. No flag is changed in that case.
            AlreadyFinalized: If the arguments have already been parsed.
        """
        if self.finalized:
            raise AlreadyFinalized()

        config_data = self._load_config_file(config_path)
        if config_data is None:
            return
        if not isinstance(config_data, dict):
            raise ValueError(
                f"Configuration file must contain a mapping, got {type(config_data).__name__}"
            )

        values: dict[str, str] = {}
        for name, value in config_data.items():
            entry = self.flags.get(name)
            if entry is None:
                logger.debug("Ignoring config key '%s': no such flag", name)
                continue
            if value is None:
                continue
            values[name] = _to_flag_text(name, entry.kind, value)

        for name, text in values.items():
            self.flags[name].value = text
            logger.debug("Flag '%s' set to %r from %s", name, text, config_path)

    def _load_config_file(self, config_path: str) -> Any:
        """Load the raw contents of a YAML or JSON file."""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        file_ext = os.path.splitext(config_path)[1].lower()

        with open(config_path, "r") as f:
            if file_ext in [".yaml", ".yml"]:
                if not HAS_YAML:
                    raise ValueError(
                        "YAML support not available. Please install PyYAML: pip install PyYAML"
                    )
                try:
                    return yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ValueError(f"Invalid YAML file: {e}") from e
            elif file_ext == ".json":
                try:
                    return json.load(f)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON file: {e}") from e
            else:
                raise ValueError(
                    f"Unsupported file format: {file_ext}. "
                    "Supported formats are: .yaml, .yml, .json"
                )

    # Parsing

    def finalize(self) -> list[str]:
        """
        Parse the arguments against the declared flags.

        Must be called before reading flag values. Flags set before an error
        keep their new values. A parser can only be finalized once.

        Returns:
            list[str]: The non-flag arguments, in their original order.

        Raises:
            MissingValue: A value flag was the last token.
            MissingArgument: A required flag has no value after parsing.
            UnknownFlag: An undeclared flag was given in strict mode.
            ExitRequested: The arguments were empty, asked for help, or
                contained an undeclared flag outside strict mode.
            AlreadyFinalized: finalize() was already called on this parser.
        """
        if self.finalized:
            raise AlreadyFinalized()
        self.finalized = True

        if not self.raw_args:
            logger.debug("No arguments given, requesting help")
            raise ExitRequested(ExitReason.NO_ARGUMENTS, 0, self.help())

        remaining: list[str] = []
        tokens = iter(self.raw_args)
        for token in tokens:
            if token.startswith(FLAG_PREFIX):
                self._consume_flag(token[len(FLAG_PREFIX) :], tokens)
            else:
                remaining.append(token)

        for name in self.required:
            if not self.is_set(name):
                raise MissingArgument(name)

        logger.debug("Parsed flags, %d remaining argument(s)", len(remaining))
        return remaining

    def _consume_flag(self, name: str, tokens: Iterator[str]) -> None:
        entry = self.flags.get(name)
        if entry is None:
            if name == HELP_FLAG:
                logger.debug("Help flag given, requesting exit")
                raise ExitRequested(ExitReason.HELP, 0, self.help())
            if self.strict_unknown:
                raise UnknownFlag(name)
            # Undeclared flags end the program with status 0, like -help
            # without the text. strict_unknown turns this into an error.
            logger.debug("Unknown flag '%s', requesting exit", name)
            raise ExitRequested(ExitReason.UNKNOWN_FLAG, 0)

        if entry.kind is FlagKind.BOOL:
            entry.value = TRUE_TEXT
        else:
            value = next(tokens, None)
            if value is None:
                raise MissingValue(name)
            entry.value = value
        logger.debug("Flag '%s' set to %r", name, entry.value)

    def safe_finalize(self) -> Result[list[str], FlagError]:
        """
        Parse the arguments without raising.

        Returns:
            Result[list[str], FlagError]:
                - Ok with the remaining non-flag arguments,
                - Err with the ParseError, ExitRequested or AlreadyFinalized
                  that `finalize()` would have raised.
        """
        try:
            return Ok(self.finalize())
        except FlagError as e:
            return Err(e)

    def finalize_or_exit(self) -> list[str]:
        """
        Parse the arguments and exit the process when they ask for it.

        On a help request, an empty argument list or (outside strict mode) an
        undeclared flag, the message if any is written to stderr and the
        process exits with the requested status. ParseError subclasses are
        left for the caller to handle.
        """
        try:
            return self.finalize()
        except ExitRequested as e:
            if e.message is not None:
                print(e.message, file=sys.stderr)
            sys.exit(e.code)
