"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``TILLCTL_*`` prefix (``TILLCTL_STOCK__FILE`` for nested)
  3. TOML file: ``tillctl.toml`` discovered via walk-up
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`tillctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from tillctl.config.discovery import find_config, find_till_root
from tillctl.config.models import HistoryConfig, StockConfig, TillConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``tillctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class TillSettings(BaseSettings):
    """Unified settings for the tillctl CLI.

    Attributes:
        till_root: Directory holding the stock file, sales history and
            journal (parent of ``tillctl.toml``, or CWD if no config found).
        config_path: Config file that was loaded, if any.
        actor: Operator name for this invocation; falls back to
            ``till.default_actor``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TILLCTL_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (not in TOML; derived from config location) ---
    till_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    actor: str | None = None

    # --- TOML sections ---
    till: TillConfig = Field(default_factory=TillConfig)
    stock: StockConfig = Field(default_factory=StockConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        till_root: Path | None = None,
        **cli_flags: Any,
    ) -> TillSettings:
        """Construct settings from a CLI invocation.

        Discovers ``tillctl.toml`` via walk-up (or explicit *config_path*),
        resolves *till_root* from the config file's parent directory (or the
        nearest ``.tillctl/`` state directory, or the working directory),
        and merges CLI flags as highest-priority overrides. Flags passed
        as ``None`` are treated as not given.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(till_root)

        resolved_root = till_root
        if resolved_root is None:
            if toml_path is not None:
                resolved_root = toml_path.parent
            else:
                resolved_root = find_till_root() or Path.cwd()

        flags = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(
                till_root=resolved_root,
                config_path=toml_path,
                **flags,
            )
        finally:
            _tls.toml_path = None

    def resolve(self, relative: str) -> Path:
        """Resolve a configured file name against :attr:`till_root`."""
        path = Path(relative)
        return path if path.is_absolute() else self.till_root / path

    @property
    def stock_path(self) -> Path:
        return self.resolve(self.stock.file)

    @property
    def history_path(self) -> Path:
        return self.resolve(self.history.file)

    @property
    def journal_path(self) -> Path:
        return self.resolve(self.history.journal)

    @property
    def effective_actor(self) -> str:
        return (self.actor or "").strip() or self.till.default_actor
