from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict


DEFAULT_CONFIG_PATH = Path("config.toml")


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the unified examples config (config.toml by default).

    ``COTTONTAIL_CONFIG`` points at another file when no explicit path is
    given. Returns an empty dict when the file is missing so callers can fall
    back to environment variables.
    """
    if path is not None:
        target = Path(path)
    else:
        target = Path(os.getenv("COTTONTAIL_CONFIG", str(DEFAULT_CONFIG_PATH)))
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


__all__ = ["load_raw_config", "DEFAULT_CONFIG_PATH"]
