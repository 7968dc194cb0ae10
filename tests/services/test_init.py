"""Tests for InitService: till directory setup."""

from __future__ import annotations

import tomllib
from pathlib import Path

from tillctl.config.models import TillFileConfig
from tillctl.infrastructure.filesystem import read_stock_file
from tillctl.services.init import InitService, render_config


class TestInitTill:
    def test_creates_config_and_stock(self, tmp_path: Path) -> None:
        root = tmp_path / "stall"
        result = InitService.init_till(root, name="market")
        assert result.ok
        assert result.data["products"] == 50
        assert (root / "tillctl.toml").is_file()
        assert len(read_stock_file(root / "stock.csv").rows) == 50
        assert (root / ".tillctl").is_dir()

    def test_name_defaults_to_directory(self, tmp_path: Path) -> None:
        result = InitService.init_till(tmp_path / "corner-shop")
        assert result.data["name"] == "corner-shop"

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        assert InitService.init_till(tmp_path).ok
        result = InitService.init_till(tmp_path)
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"

    def test_force_resets_stock_keeps_history(self, tmp_path: Path) -> None:
        InitService.init_till(tmp_path)
        (tmp_path / "stock.csv").write_text("junk", encoding="utf-8")
        (tmp_path / "sales_history.txt").write_text("old sales\n", encoding="utf-8")
        assert InitService.init_till(tmp_path, force=True).ok
        assert len(read_stock_file(tmp_path / "stock.csv").rows) == 50
        assert (tmp_path / "sales_history.txt").read_text(encoding="utf-8") == "old sales\n"


class TestRenderConfig:
    def test_parses_back_to_defaults(self) -> None:
        parsed = TillFileConfig.model_validate(tomllib.loads(render_config("pop-up-till")))
        assert parsed == TillFileConfig()
