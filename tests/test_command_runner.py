import os
from pathlib import Path

import pytest

from visualcodex.commands import CommandRunner

pytestmark = pytest.mark.skipif(os.name == "nt", reason="commands below assume a POSIX shell")


def test_captures_stdout_through_a_pipe(tmp_path) -> None:
    result = CommandRunner().run("echo hello | tr a-z A-Z", tmp_path)

    assert result.stdout == "HELLO\n"
    assert result.stderr == ""
    assert result.exit_code == 0
    assert result.error is None


def test_captures_stderr_and_exit_code(tmp_path) -> None:
    result = CommandRunner().run("echo oops 1>&2; exit 3", tmp_path)

    assert result.stdout == ""
    assert result.stderr == "oops\n"
    assert result.exit_code == 3
    assert not result.success


def test_runs_in_the_given_directory(tmp_path) -> None:
    result = CommandRunner().run("pwd", tmp_path)

    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()


def test_redirection_writes_relative_to_cwd(tmp_path) -> None:
    CommandRunner().run("echo data > out.log", tmp_path)

    assert (tmp_path / "out.log").read_text() == "data\n"


def test_missing_directory_is_reported_not_raised(tmp_path) -> None:
    result = CommandRunner().run("echo hi", tmp_path / "does-not-exist")

    assert result.exit_code == -1
    assert result.error
    assert result.stdout == ""


def test_killed_by_signal_reports_minus_one(tmp_path) -> None:
    result = CommandRunner().run("kill -9 $$", tmp_path)

    assert result.exit_code == -1
    assert result.error is None
