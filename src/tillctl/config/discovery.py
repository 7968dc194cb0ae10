"""Locate the till a command runs against.

A till directory is marked by ``tillctl.toml`` or by the ``.tillctl/``
state directory that holds the journal. Both are searched for by walking
up from the working directory, so commands work from any subdirectory of
a till. The nearest marker wins: a till nested inside another never
picks up the outer till's config.

``TILLCTL_CONFIG`` (or ``--config``) names a config file directly and
skips the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tillctl.config.models import TillFileConfig
from tillctl.domain.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator

CONFIG_FILENAME = "tillctl.toml"
CONFIG_ENV_VAR = "TILLCTL_CONFIG"
STATE_DIRNAME = ".tillctl"


def _walk_up(start: Path | None) -> Iterator[Path]:
    current = (start or Path.cwd()).resolve()
    yield current
    yield from current.parents


def _is_till_dir(directory: Path) -> bool:
    return (directory / CONFIG_FILENAME).is_file() or (directory / STATE_DIRNAME).is_dir()


def find_till_root(start: Path | None = None) -> Path | None:
    """Nearest directory at or above *start* that is a till, or None."""
    for directory in _walk_up(start):
        if _is_till_dir(directory):
            return directory
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Config file for the till at or above *start*, or None.

    ``TILLCTL_CONFIG`` takes precedence; if it names a missing file there is
    no config. A till found without ``tillctl.toml`` runs on defaults.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    root = find_till_root(start)
    if root is None:
        return None
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config(path: Path | None = None, cwd: Path | None = None) -> TillFileConfig:
    """Load and validate ``tillctl.toml``; defaults when there is none.

    Raises:
        ValidationError: If the file is not valid TOML.
        pydantic.ValidationError: If a value is out of range.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return TillFileConfig()

    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValidationError(f"Invalid TOML in {path}: {exc}", detail={"path": str(path)}) from exc
    return TillFileConfig.model_validate(data)
