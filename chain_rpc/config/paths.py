# config/paths.py
from __future__ import annotations

import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

APP_DIR_NAME = "chain-rpc"


def user_cache_root() -> Path:
    """
    Platform cache root, same lookup order as Go's os.UserCacheDir:
      XDG_CACHE_HOME, then ~/Library/Caches (macOS), %LOCALAPPDATA% (Windows),
      ~/.cache everywhere else. Falls back to the temp dir.
    """
    xdg = os.getenv("XDG_CACHE_HOME", "").strip()
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    if sys.platform == "win32":
        local = os.getenv("LOCALAPPDATA", "").strip()
        if local:
            return Path(local)
    else:
        home = os.getenv("HOME", "").strip()
        if home:
            if sys.platform == "darwin":
                return Path(home) / "Library" / "Caches"
            return Path(home) / ".cache"
    return Path(tempfile.gettempdir())


def user_config_root() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME", "").strip()
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA", "").strip()
        if appdata:
            return Path(appdata)
    return Path.home() / ".config"


@dataclass
class CacheLayout:
    # root folder for the directory artifact (override via CHAIN_RPC_CACHE_DIR)
    cache_dir: Optional[Path] = None
    cache_file_name: str = "cache.json"

    def __post_init__(self) -> None:
        if self.cache_dir is None:
            self.cache_dir = user_cache_root() / APP_DIR_NAME
        self.cache_dir = Path(self.cache_dir)

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / self.cache_file_name

    def ensure_dir(self) -> Path:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return self.cache_dir

    def temp_file(self) -> Path:
        # same directory as the artifact so os.replace stays on one filesystem
        return self.cache_dir / f".{self.cache_file_name}.{os.getpid()}.tmp"


def default_config_file() -> Path:
    return user_config_root() / APP_DIR_NAME / "config.yaml"
