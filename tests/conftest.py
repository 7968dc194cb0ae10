"""Shared pytest fixtures and test helpers for tillctl tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from click.testing import CliRunner

from tillctl.config.settings import TillSettings
from tillctl.domain.catalog import Catalog, Product
from tillctl.infrastructure.till import Till

FIXED_NOW = datetime(2026, 10, 16, 14, 3, 22, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TILLCTL_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("TILLCTL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def till_root(tmp_path: Path) -> Path:
    """Temporary till directory (stock file, history and journal land here)."""
    return tmp_path


@pytest.fixture
def settings(till_root: Path) -> TillSettings:
    return TillSettings.from_cli(till_root=till_root)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """A clock frozen at 16/10/2026 14:03:22 UTC."""
    return lambda: FIXED_NOW


@pytest.fixture
def scenario_catalog() -> Catalog:
    """Small catalog covering the stock bands used by the checkout scenarios.

    ``SC-WS-M`` is the $27.00 scarf with 18 in stock; ``BE-CB-Kids`` has
    only 2 left; ``SO-TS-L`` is sold out; ``GL-FG-XS`` sits in the low band.
    """
    return Catalog(
        [
            Product(
                sku="SC-WS-M",
                category="Scarves",
                name="Wool Scarf",
                size="M",
                unit_price=Decimal("27.00"),
                current_stock=18,
            ),
            Product(
                sku="BE-CB-Kids",
                category="Beanies",
                name="Classic Beanie",
                size="Kids",
                unit_price=Decimal("18.00"),
                current_stock=2,
            ),
            Product(
                sku="SO-TS-L",
                category="Socks",
                name="Thermal Socks",
                size="L",
                unit_price=Decimal("16.00"),
                current_stock=0,
            ),
            Product(
                sku="GL-FG-XS",
                category="Gloves",
                name="Fingerless Gloves",
                size="XS",
                unit_price=Decimal("20.00"),
                current_stock=8,
            ),
        ]
    )


@pytest.fixture
def till(
    settings: TillSettings,
    scenario_catalog: Catalog,
    clock: Callable[[], datetime],
) -> Till:
    """Till on a temp directory with the scenario catalog and a frozen clock."""
    return Till(settings, catalog=scenario_catalog, clock=clock)


@pytest.fixture
def _isolated_till(till_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp till root so the CLI works on an isolated till.

    Use via ``@pytest.mark.usefixtures("_isolated_till")`` on command test
    classes.
    """
    monkeypatch.chdir(till_root)
