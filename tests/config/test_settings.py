"""Tests for TillSettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from tillctl.config.settings import TillSettings


class TestTillSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = TillSettings.from_cli(till_root=tmp_path)
        assert settings.till_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.till.name == "pop-up-till"
        assert settings.stock.critical_threshold == 5
        assert settings.history.append_retries == 3
        assert settings.effective_actor == "Walk-in"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = TillSettings.from_cli(till_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_paths(self, tmp_path: Path) -> None:
        settings = TillSettings.from_cli(till_root=tmp_path)
        assert settings.stock_path == tmp_path / "stock.csv"
        assert settings.journal_path == tmp_path / ".tillctl" / "journal.jsonl"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "tillctl.toml").write_text(
            '[till]\nname = "market"\ndefault_actor = "Front desk"\n[stock]\nfile = "levels.csv"\n'
        )
        settings = TillSettings.from_cli(till_root=tmp_path)
        assert settings.till.name == "market"
        assert settings.effective_actor == "Front desk"
        assert settings.stock_path == tmp_path / "levels.csv"
        assert settings.stock.low_threshold == 10  # default preserved

    def test_root_from_discovered_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "tillctl.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = TillSettings.from_cli()
        assert settings.till_root.resolve() == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[history]\nappend_retries = 5\n")
        settings = TillSettings.from_cli(config_path=str(custom), till_root=tmp_path)
        assert settings.history.append_retries == 5
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "tillctl.toml").write_text("[till\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            TillSettings.from_cli(till_root=tmp_path)


class TestPriority:
    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = TillSettings.from_cli(
            till_root=tmp_path, json_output=True, quiet=True, actor="Sam"
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.effective_actor == "Sam"

    def test_none_flags_ignored(self, tmp_path: Path) -> None:
        settings = TillSettings.from_cli(till_root=tmp_path, actor=None)
        assert settings.actor is None

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "tillctl.toml").write_text('[stock]\nfile = "from-toml.csv"\n')
        monkeypatch.setenv("TILLCTL_STOCK__FILE", "from-env.csv")
        settings = TillSettings.from_cli(till_root=tmp_path)
        assert settings.stock.file == "from-env.csv"

    def test_root_from_state_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".tillctl").mkdir()
        nested = tmp_path / "receipts"
        nested.mkdir()
        monkeypatch.chdir(nested)
        settings = TillSettings.from_cli()
        assert settings.till_root.resolve() == tmp_path.resolve()
        assert settings.config_path is None
