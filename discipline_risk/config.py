from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml

BUNDLED_CONFIG_PATH = Path(__file__).resolve().parent / "configs" / "config.yaml"
LOCAL_CONFIG_PATH = Path("configs/config.yaml")


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit path, then $DISCIPLINE_RISK_CONFIG, then ./configs/config.yaml, then the bundled default."""
    explicit = path or os.environ.get("DISCIPLINE_RISK_CONFIG")
    if explicit:
        return Path(explicit)
    if LOCAL_CONFIG_PATH.exists():
        return LOCAL_CONFIG_PATH
    return BUNDLED_CONFIG_PATH


def load_config(path: str | Path | None = None) -> dict:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(f"{cfg_path} not found")
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=1)
def get_config() -> dict:
    return load_config()


def max_recommendations(cfg: dict | None = None) -> int:
    cfg = cfg if cfg is not None else get_config()
    return int((cfg.get("recommendations") or {}).get("max_items", 5))
