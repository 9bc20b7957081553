# config/settings.py
# Runtime configuration for the directory cache and the prober.
#
# Precedence (highest first):
#   1) keyword overrides passed to Settings.load()
#   2) environment variables (CHAIN_RPC_*)
#   3) YAML config file (CHAIN_RPC_CONFIG or ~/.config/chain-rpc/config.yaml)
#   4) hardcoded defaults

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..log import get_logger
from .paths import CacheLayout, default_config_file

log = get_logger(__name__)

CHAINS_DATA_URL = "https://chainlist.org/rpcs.json"
CACHE_TTL = timedelta(days=30)
DEFAULT_FEED_TIMEOUT = 30.0
DEFAULT_PROBE_TIMEOUT = 0.2
DEFAULT_INDEX_WORKERS = 8

# env var -> (settings field, converter)
_ENV_FIELDS = {
    "CHAIN_RPC_FEED_URL": ("feed_url", str),
    "CHAIN_RPC_CACHE_DIR": ("cache_dir", Path),
    "CHAIN_RPC_CACHE_TTL_DAYS": ("cache_ttl", lambda v: timedelta(days=float(v))),
    "CHAIN_RPC_FEED_TIMEOUT": ("feed_timeout", float),
    "CHAIN_RPC_PROBE_TIMEOUT": ("probe_timeout", float),
    "CHAIN_RPC_INDEX_WORKERS": ("index_workers", int),
}

# yaml key -> (settings field, converter)
_YAML_FIELDS = {
    "feed_url": ("feed_url", str),
    "cache_dir": ("cache_dir", lambda v: Path(v).expanduser()),
    "cache_ttl_days": ("cache_ttl", lambda v: timedelta(days=float(v))),
    "feed_timeout": ("feed_timeout", float),
    "probe_timeout": ("probe_timeout", float),
    "index_workers": ("index_workers", int),
}


@dataclass
class Settings:
    feed_url: str = CHAINS_DATA_URL
    cache_dir: Optional[Path] = None
    cache_file_name: str = "cache.json"
    cache_ttl: timedelta = CACHE_TTL
    feed_timeout: float = DEFAULT_FEED_TIMEOUT
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    index_workers: int = DEFAULT_INDEX_WORKERS
    verbose: bool = False
    force_rebuild: bool = False
    layout: CacheLayout = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.layout = CacheLayout(cache_dir=self.cache_dir, cache_file_name=self.cache_file_name)
        self.cache_dir = self.layout.cache_dir

    @property
    def cache_file(self) -> Path:
        return self.layout.cache_file

    def with_flags(self, *, verbose: Optional[bool] = None, force_rebuild: Optional[bool] = None) -> "Settings":
        """Copy with the per-invocation flags swapped in."""
        changes: Dict[str, Any] = {}
        if verbose is not None:
            changes["verbose"] = verbose
        if force_rebuild is not None:
            changes["force_rebuild"] = force_rebuild
        return replace(self, **changes)

    @classmethod
    def load(cls, config_file: Optional[Path] = None, **overrides: Any) -> "Settings":
        values: Dict[str, Any] = {}

        path = config_file or _env_config_path() or default_config_file()
        values.update(_read_yaml(Path(path)))
        values.update(_read_env())
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _env_config_path() -> Optional[Path]:
    raw = os.getenv("CHAIN_RPC_CONFIG", "").strip()
    return Path(raw).expanduser() if raw else None


def _read_env() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for var, (name, convert) in _ENV_FIELDS.items():
        raw = os.getenv(var, "").strip()
        if not raw:
            continue
        try:
            out[name] = convert(raw)
        except ValueError:
            log.warning(f"[config] ignoring {var}={raw!r}: not a valid value")
    return out


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        cfg = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning(f"[config] failed to read {path}: {e}")
        return {}
    if not isinstance(cfg, dict):
        log.warning(f"[config] {path} is not a mapping, ignoring it")
        return {}

    out: Dict[str, Any] = {}
    for key, (name, convert) in _YAML_FIELDS.items():
        if cfg.get(key) is None:
            continue
        try:
            out[name] = convert(cfg[key])
        except (TypeError, ValueError):
            log.warning(f"[config] ignoring {key}={cfg[key]!r} in {path}")
    return out
