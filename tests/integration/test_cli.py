"""Integration tests for the command line entry point."""

import time
from pathlib import Path

import pytest
import yaml

from nurtra.__main__ import main, parse_args
from nurtra.account import InMemoryAccountStore
from nurtra.session.app import USER_ID_ENV_VAR
from nurtra.tts import SpeechCache


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write a self-contained offline config."""
    monkeypatch.delenv(USER_ID_ENV_VAR, raising=False)
    path = tmp_path / "nurtra.yaml"
    data = {
        "nurtra": {
            "cache": {"directory": str(tmp_path / "speech")},
            "restriction": {"state_path": str(tmp_path / "state.json")},
            "quotes": {"skip_delay_seconds": 0.0},
            "logging": {"level": "WARNING"},
            "testing": {"use_mocks": True, "user_id": "cli-user"},
        }
    }
    path.write_text(yaml.safe_dump(data))
    return path


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.config is None
        assert args.profile is None
        assert not args.mock
        assert not args.precache

    def test_flags(self) -> None:
        args = parse_args(["--profile", "test", "--mock", "--user", "u1"])
        assert args.profile == "test"
        assert args.mock
        assert args.user == "u1"

    def test_unknown_profile_rejected(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--profile", "staging"])


class TestMain:
    """Tests for main."""

    def test_dry_run(self) -> None:
        assert main(["--profile", "test", "--dry-run"]) == 0

    def test_missing_config(self, tmp_path: Path) -> None:
        assert main(["--config", str(tmp_path / "missing.yaml")]) == 1

    def test_clear_cache(self, config_path: Path, tmp_path: Path, capsys) -> None:
        cache = SpeechCache(tmp_path / "speech")
        cache.store("one", b"\x00\x01")
        cache.store("two", b"\x00\x02")

        assert main(["--config", str(config_path), "--clear-cache"]) == 0

        assert "Removed 2 cached clips" in capsys.readouterr().out
        assert len(cache) == 0

    def test_precache(self, config_path: Path, tmp_path: Path, capsys) -> None:
        assert main(["--config", str(config_path), "--precache"]) == 0

        assert "failed 0" in capsys.readouterr().out
        assert len(SpeechCache(tmp_path / "speech")) > 0

    def test_session_overcome(
        self, config_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("builtins.input", lambda prompt="": "")

        assert main(["--config", str(config_path)]) == 0

        assert "Well done. Cravings overcome: 1" in capsys.readouterr().out

    def test_session_overcome_waits_for_slow_store(
        self, config_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        increment = InMemoryAccountStore.increment_overcome_count

        def slow_increment(store: InMemoryAccountStore) -> int:
            time.sleep(0.05)
            return increment(store)

        monkeypatch.setattr(InMemoryAccountStore, "increment_overcome_count", slow_increment)
        monkeypatch.setattr("builtins.input", lambda prompt="": "")

        assert main(["--config", str(config_path)]) == 0

        assert "Cravings overcome: 1" in capsys.readouterr().out

    def test_session_relapse(
        self, config_path: Path, capsys, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("builtins.input", lambda prompt="": "r")

        assert main(["--config", str(config_path)]) == 0

        assert "Logged a binge-free period" in capsys.readouterr().out

    def test_session_interrupted(
        self, config_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def interrupted(prompt: str = "") -> str:
            raise EOFError

        monkeypatch.setattr("builtins.input", interrupted)

        assert main(["--config", str(config_path)]) == 130
