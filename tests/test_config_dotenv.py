from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from lib_event_buffer import cli as cli_module
from lib_event_buffer import config as buffer_config


@pytest.fixture(autouse=True)
def _reset_dotenv_state() -> Iterator[None]:
    """Reset shared dotenv state around each test."""

    buffer_config._reset_dotenv_state_for_testing()
    yield
    buffer_config._reset_dotenv_state_for_testing()


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values without overriding call arguments."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("EVENT_BUFFER_JSON_FIELD=dotenv-field\n")
    monkeypatch.chdir(nested)
    monkeypatch.delenv(buffer_config.JSON_FIELD_ENV_VAR, raising=False)

    loaded = buffer_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ[buffer_config.JSON_FIELD_ENV_VAR] == "dotenv-field"
    assert buffer_config.load_settings().json_field == "dotenv-field"
    assert buffer_config.load_settings(json_field="explicit").json_field == "explicit"

    os.environ.pop(buffer_config.JSON_FIELD_ENV_VAR, None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    nested = tmp_path / "nested"
    nested.mkdir()
    (tmp_path / ".env").write_text("EVENT_BUFFER_MAX_LEN=99\n")
    monkeypatch.chdir(nested)
    monkeypatch.setenv(buffer_config.MAX_LEN_ENV_VAR, "10")

    result = buffer_config.enable_dotenv()

    assert result is not None
    assert os.environ[buffer_config.MAX_LEN_ENV_VAR] == "10"


def test_enable_dotenv_with_explicit_start_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    env_file = tmp_path / "a" / ".env"
    env_file.write_text("EVENT_BUFFER_EOL=|\n")
    monkeypatch.delenv(buffer_config.EOL_ENV_VAR, raising=False)

    assert buffer_config.enable_dotenv(search_from=nested) == env_file.resolve()
    assert buffer_config.load_settings().eol == b"|"

    os.environ.pop(buffer_config.EOL_ENV_VAR, None)


def test_enable_dotenv_returns_none_without_file(tmp_path: Path) -> None:
    assert buffer_config.enable_dotenv(search_from=tmp_path) is None


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()

    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(buffer_config, "enable_dotenv", record_enable)
    monkeypatch.delenv(buffer_config.DOTENV_ENV_VAR, raising=False)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    env = {buffer_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_module.cli, ["info"], env=env)
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    env = {buffer_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env=env)
    assert result.exit_code == 0
    assert calls == []
