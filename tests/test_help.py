import pytest
from io import StringIO
from unittest.mock import patch

from dashflags import FlagParser, MissingArgument


def test_default_help():
    parser = FlagParser.from_list(["head", "-verbose", "file.txt"])
    parser.bool_flag("verbose", "this is used to get verbose output")

    parser.finalize()

    assert parser.help() == (
        "Usage: head [options...]\n  -verbose\n\tthis is used to get verbose output\n"
    )


def test_help_flags_sorted_by_name():
    parser = FlagParser.from_list(["head"])
    parser.bool_flag("verbose", "verbose output")
    parser.required_flag("opt", "an option")
    parser.required_flag("num", "a number")

    assert parser.help_flags() == (
        "  -num value\n\ta number\n"
        "  -opt value\n\tan option\n"
        "  -verbose\n\tverbose output\n"
    )


def test_help_flags_with_no_flags():
    parser = FlagParser.from_list(["head"])
    assert parser.help_flags() == "\n"
    assert parser.help() == "Usage: head [options...]\n\n"


def test_help_reflects_redeclaration():
    parser = FlagParser.from_list(["head"])
    parser.bool_flag("mode", "a toggle")
    parser.optional_flag("mode", "a mode")

    assert parser.help_flags() == "  -mode value\n\ta mode\n"


def test_custom_help_fn():
    parser = FlagParser.from_list(["head", "-verbose", "file.txt"])
    parser.bool_flag("verbose", "this is used to get verbose output")

    command = parser.command
    help_flags = parser.help_flags()
    parser.set_help_fn(lambda: f"Usage: {command} [options...] <file>\n{help_flags}")

    parser.finalize()

    assert parser.help() == (
        "Usage: head [options...] <file>\n"
        "  -verbose\n\tthis is used to get verbose output\n"
    )


def test_custom_help_fn_used_for_help_request():
    parser = FlagParser.from_list(["head", "-help"])
    parser.set_help_fn(lambda: "custom help")

    result = parser.safe_finalize()
    assert result.err_value.message == "custom help"


def test_print_help_defaults_to_stderr():
    parser = FlagParser.from_list(["head"])
    parser.bool_flag("verbose", "verbose output")

    with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
        parser.print_help()

    assert mock_stderr.getvalue() == parser.help() + "\n"


def test_print_help_to_file():
    parser = FlagParser.from_list(["head"])
    out = StringIO()

    parser.print_help(out)

    assert out.getvalue().startswith("Usage: head [options...]")


class TestFinalizeOrExit:
    """Test suite for the process-exiting parse."""

    def test_help_flag_prints_and_exits(self):
        parser = FlagParser.from_list(["head", "-help"])
        parser.bool_flag("verbose", "verbose output")

        with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            with pytest.raises(SystemExit) as exc:
                parser.finalize_or_exit()
            help_output = mock_stderr.getvalue()

        assert exc.value.code == 0
        assert "Usage: head [options...]" in help_output
        assert "-verbose" in help_output
        assert "verbose output" in help_output

    def test_empty_arguments_print_and_exit(self):
        parser = FlagParser.from_list(["head"])
        parser.required_flag("num", "a number")

        with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            with pytest.raises(SystemExit) as exc:
                parser.finalize_or_exit()

        assert exc.value.code == 0
        assert "-num value" in mock_stderr.getvalue()

    def test_unknown_flag_exits_silently(self):
        parser = FlagParser.from_list(["head", "-nope"])

        with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            with pytest.raises(SystemExit) as exc:
                parser.finalize_or_exit()

        assert exc.value.code == 0
        assert mock_stderr.getvalue() == ""

    def test_parse_errors_propagate(self):
        parser = FlagParser.from_list(["head", "file.txt"])
        parser.required_flag("num", "a number")

        with pytest.raises(MissingArgument):
            parser.finalize_or_exit()

    def test_returns_remaining(self):
        parser = FlagParser.from_list(["head", "-num", "3", "a", "b"])
        parser.required_flag("num", "a number")

        assert parser.finalize_or_exit() == ["a", "b"]
