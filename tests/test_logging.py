import io

from visualcodex.constants import CLR_RESET
from visualcodex.utils.logging import Logger


def make_logger(debug=False):
    out, err = io.StringIO(), io.StringIO()
    return Logger(debug_enabled=debug, out=out, err=err), out, err


def test_info_levels_go_to_stdout() -> None:
    logger, out, err = make_logger()

    logger.system("ready")
    logger.command("Executing command: ls")

    assert "[System]: " in out.getvalue()
    assert "Executing command: ls" in out.getvalue()
    assert err.getvalue() == ""


def test_warnings_and_errors_go_to_stderr() -> None:
    logger, out, err = make_logger()

    logger.warning("careful")
    logger.error("broken")

    assert out.getvalue() == ""
    assert "[Warning]: " in err.getvalue()
    assert "broken" in err.getvalue()


def test_debug_is_gated() -> None:
    logger, out, _ = make_logger()

    logger.debug("hidden")
    logger.set_debug(True)
    logger.debug("shown")

    assert "hidden" not in out.getvalue()
    assert "shown" in out.getvalue()


def test_continuation_lines_are_indented_to_message_column() -> None:
    logger, _, _ = make_logger()

    record = logger.format_record("File", "first\nsecond", timestamp="2024-01-01 00:00:00")

    first_line, second_line = record.split("\n")
    prefix = "[2024-01-01 00:00:00] [File]: "
    assert prefix in first_line
    assert first_line.endswith(f"first{CLR_RESET}")
    assert second_line.startswith(" " * len(prefix))
    assert second_line.endswith(f"second{CLR_RESET}")


def test_empty_message_still_writes_a_header() -> None:
    logger, _, _ = make_logger()

    record = logger.format_record("System", "", timestamp="t")

    assert "[t] [System]: " in record
    assert "\n" not in record
