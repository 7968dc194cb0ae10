"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, tillctl.toml only contains
overrides. A fresh till needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tillctl.domain.types import ANONYMOUS_ACTOR, CRITICAL_STOCK_THRESHOLD, LOW_STOCK_THRESHOLD

# --- tillctl.toml sections ---


class TillConfig(BaseModel):
    """[till] section."""

    model_config = {"frozen": True}

    name: str = "pop-up-till"
    default_actor: str = ANONYMOUS_ACTOR


class StockConfig(BaseModel):
    """[stock] section."""

    model_config = {"frozen": True}

    file: str = "stock.csv"
    critical_threshold: int = Field(default=CRITICAL_STOCK_THRESHOLD, ge=1)
    low_threshold: int = Field(default=LOW_STOCK_THRESHOLD, ge=1)


class HistoryConfig(BaseModel):
    """[history] section."""

    model_config = {"frozen": True}

    file: str = "sales_history.txt"
    journal: str = ".tillctl/journal.jsonl"
    append_retries: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=0.2, ge=0)


class TillFileConfig(BaseModel):
    """Root configuration composing all sections of tillctl.toml."""

    model_config = {"frozen": True}

    till: TillConfig = Field(default_factory=TillConfig)
    stock: StockConfig = Field(default_factory=StockConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
