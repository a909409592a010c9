import pytest

from visualcodex import cli
from visualcodex.core.application import VisualCodex
from visualcodex.models import AutonomyLevel, TurnResult


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(cli, "colorama_init", lambda **kwargs: None)
    monkeypatch.setattr(VisualCodex, "install_signal_handlers", lambda self: None)


class FakeOrchestrator:
    def __init__(self, result=None, error=None):
        self.result = result or TurnResult(success=True, output="done", exit_code=0)
        self.error = error
        self.turns = []

    def execute_turn(self, prompt, working_directory=None, autonomy_level=None):
        self.turns.append((prompt, working_directory, autonomy_level))
        if self.error:
            raise self.error
        return self.result


def test_read_prints_file(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "hello.txt").write_text("hello world\n")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config-dir", str(tmp_path / "cfg"), "--read", "hello.txt"])

    assert excinfo.value.code == 0
    assert "hello world\n" in capsys.readouterr().out


def test_read_missing_file_exits_nonzero(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config-dir", str(tmp_path / "cfg"), "--read", "nope.txt"])

    assert excinfo.value.code == 1


def test_list_prints_entries(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "src").mkdir()
    (tmp_path / "setup.py").write_text("")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config-dir", str(tmp_path / "cfg"), "--list"])

    out = capsys.readouterr().out
    assert excinfo.value.code == 0
    assert "src/" in out
    assert "setup.py" in out
    assert out.index("src/") < out.index("setup.py")


def test_prompt_without_credential_exits_nonzero(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config-dir", str(tmp_path / "cfg"), "--cwd", str(tmp_path), "hello"])

    assert excinfo.value.code == 1


def test_invalid_config_exits_nonzero(tmp_path) -> None:
    (tmp_path / "config.yaml").write_text("approval_mode: reckless\n")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config-dir", str(tmp_path), "hello"])

    assert excinfo.value.code == 1


def test_prompt_words_mode_and_cwd_reach_the_turn(tmp_path, monkeypatch, capsys) -> None:
    orchestrator = FakeOrchestrator()

    def fake_create_application(config_dir=None, debug=False, model=None):
        return VisualCodex(config_dir, debug, model, orchestrator=orchestrator)

    monkeypatch.setattr(cli, "create_application", fake_create_application)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config-dir", str(tmp_path), "--mode", "full-auto", "--cwd", "/srv/repo",
                  "run", "the", "tests"])

    assert excinfo.value.code == 0
    assert orchestrator.turns == [("run the tests", "/srv/repo", "full-auto")]
    assert "done" in capsys.readouterr().out


def test_config_summary_returns_without_exit(tmp_path) -> None:
    assert cli.main(["--config-dir", str(tmp_path), "--config-summary"]) is None


def test_model_flag_overrides_config(tmp_path) -> None:
    app = VisualCodex(str(tmp_path), model="gpt-cli", orchestrator=FakeOrchestrator())

    assert app.config_manager.snapshot().default_model == "gpt-cli"


def test_turn_defaults_to_configured_mode(tmp_path) -> None:
    (tmp_path / "config.yaml").write_text("approval_mode: auto-edit\n")
    orchestrator = FakeOrchestrator()
    app = VisualCodex(str(tmp_path), orchestrator=orchestrator)

    app.execute_turn("hi", str(tmp_path))

    assert orchestrator.turns[0][2] is AutonomyLevel.AUTO_EDIT


def test_unexpected_error_becomes_failed_result(tmp_path) -> None:
    app = VisualCodex(str(tmp_path), orchestrator=FakeOrchestrator(error=RuntimeError("kaboom")))

    result = app.execute_turn("hi", str(tmp_path), AutonomyLevel.SUGGEST)

    assert not result.success
    assert result.error == "kaboom"
    assert result.error_type == "RuntimeError"


def test_interactive_mode_switches_level_and_quits(tmp_path, monkeypatch) -> None:
    orchestrator = FakeOrchestrator()
    app = VisualCodex(str(tmp_path), orchestrator=orchestrator)
    inputs = iter(["/mode full-auto", "", "list files", "/mode bogus", "exit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

    app.run_interactive_mode(str(tmp_path))

    assert orchestrator.turns == [("list files", str(tmp_path), AutonomyLevel.FULL_AUTO)]


def test_interactive_mode_stops_on_eof(tmp_path, monkeypatch) -> None:
    app = VisualCodex(str(tmp_path), orchestrator=FakeOrchestrator())

    def raise_eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", raise_eof)

    app.run_interactive_mode(str(tmp_path))


def test_read_and_list_resolve_against_cwd_flag(tmp_path, monkeypatch, capsys) -> None:
    repo = tmp_path / "repo"
    (repo / "docs").mkdir(parents=True)
    (repo / "docs" / "guide.md").write_text("# Guide\n")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    config_dir = str(tmp_path / "cfg")

    with pytest.raises(SystemExit) as read_exit:
        cli.main(["--config-dir", config_dir, "--cwd", str(repo), "--read", "docs/guide.md"])
    read_out = capsys.readouterr().out

    with pytest.raises(SystemExit) as list_exit:
        cli.main(["--config-dir", config_dir, "--cwd", str(repo), "--list", "docs"])
    list_out = capsys.readouterr().out

    assert read_exit.value.code == 0
    assert "# Guide\n" in read_out
    assert list_exit.value.code == 0
    assert "guide.md" in list_out


def test_file_access_uses_given_directory_or_process_cwd(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "here.txt").write_text("here")
    app = VisualCodex(str(tmp_path / "cfg"), orchestrator=FakeOrchestrator())

    assert app.read_file("here.txt").content == "here"
    assert app.write_file("there.txt", "there", str(tmp_path / "sub")).success
    assert (tmp_path / "sub" / "there.txt").read_text() == "there"
