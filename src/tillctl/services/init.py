"""InitService: set up a till directory.

Writes a sparse ``tillctl.toml`` and a fresh stock file from the default
catalog. Sales history and the journal are never touched, so re-running
``init --force`` resets stock levels without losing past sales.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tillctl.config.discovery import CONFIG_FILENAME
from tillctl.config.models import TillFileConfig
from tillctl.domain.errors import PersistenceError
from tillctl.domain.seed import build_default_catalog
from tillctl.infrastructure.filesystem import write_stock_file
from tillctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def render_config(name: str) -> str:
    """Render a starter ``tillctl.toml`` with every default spelled out."""
    defaults = TillFileConfig()
    return (
        "[till]\n"
        f'name = "{name}"\n'
        f'default_actor = "{defaults.till.default_actor}"\n'
        "\n"
        "[stock]\n"
        f'file = "{defaults.stock.file}"\n'
        f"critical_threshold = {defaults.stock.critical_threshold}\n"
        f"low_threshold = {defaults.stock.low_threshold}\n"
        "\n"
        "[history]\n"
        f'file = "{defaults.history.file}"\n'
        f'journal = "{defaults.history.journal}"\n'
        f"append_retries = {defaults.history.append_retries}\n"
        f"retry_delay_seconds = {defaults.history.retry_delay_seconds}\n"
    )


class InitService:
    """Till directory setup. Stateless; needs no running till."""

    @staticmethod
    def init_till(root: Path, *, name: str | None = None, force: bool = False) -> ServiceResult:
        """Create ``tillctl.toml`` and ``stock.csv`` under *root*.

        Refuses to overwrite an existing config unless *force* is set.
        """
        op = "init_till"
        config_path = root / CONFIG_FILENAME
        if config_path.exists() and not force:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"Till already initialised at {root} (use --force to reset stock)",
                detail={"path": str(config_path)},
            )

        till_name = name or root.name or TillFileConfig().till.name
        defaults = TillFileConfig()
        catalog = build_default_catalog()
        stock_path = root / defaults.stock.file
        try:
            root.mkdir(parents=True, exist_ok=True)
            config_path.write_text(render_config(till_name), encoding="utf-8")
            (root / defaults.history.journal).parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return ServiceResult.failure(
                op, ErrorCode.PERSISTENCE_FAILED, f"Cannot write {config_path}: {exc}"
            )
        try:
            count = write_stock_file(stock_path, catalog.list())
        except PersistenceError as exc:
            return ServiceResult.failure(
                op, ErrorCode.PERSISTENCE_FAILED, exc.message, detail=exc.detail
            )

        logger.info("Initialised till %s at %s", till_name, root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": till_name,
                "path": str(root),
                "config": str(config_path),
                "stock_file": str(stock_path),
                "products": count,
            },
        )
