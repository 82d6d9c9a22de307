"""
dashflags - imperative single-dash command-line flag parsing.

Declare boolean, required and optional value flags one call at a time, parse an
argument vector against them, read the values back as any type, and get usage
text generated from the declarations. Flag values can also be seeded from YAML
or JSON files.
"""

from .errors import (
    AlreadyFinalized,
    ExitReason,
    ExitRequested,
    FlagError,
    FlagUnset,
    InvalidValue,
    MissingArgument,
    MissingValue,
    ParseError,
    UnknownFlag,
)
from .parser import FlagEntry, FlagKind, FlagParser

__version__ = "1.0.0"
__all__ = [
    "AlreadyFinalized",
    "ExitReason",
    "ExitRequested",
    "FlagEntry",
    "FlagError",
    "FlagKind",
    "FlagParser",
    "FlagUnset",
    "InvalidValue",
    "MissingArgument",
    "MissingValue",
    "ParseError",
    "UnknownFlag",
]
