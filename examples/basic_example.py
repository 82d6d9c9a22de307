#!/usr/bin/env python3
"""
Example script demonstrating the usage of FlagParser.

Try it with:
    python examples/basic_example.py -verbose -num 3 a.txt b.txt
    python examples/basic_example.py -help
"""

import sys

from dashflags import FlagParser, ParseError


def main() -> None:
    """Main function demonstrating the parser."""
    parser = FlagParser.from_env()
    parser.bool_flag("verbose", "this is used to get verbose output")
    parser.required_flag("num", "this is a required flag")

    try:
        remaining = parser.finalize_or_exit()
    except ParseError as e:
        print(f"{parser.command}: {e}")
        sys.exit(1)

    print("\n### args parsed ###\n")

    verbose = parser.get_value("verbose", bool)
    print(f"verbose: {verbose}")

    num = parser.get_value("num") or ""
    print(f"num: {num}")
    print(f"remaining_args: {', '.join(remaining)}")

    print("\n### help generation ###\n")

    print(parser.help())


if __name__ == "__main__":
    main()
