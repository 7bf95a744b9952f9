"""Vault discovery from the Obsidian application config."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

from .vault.errors import VaultNotFoundError

CONFIG_ENV = "VLT_OBSIDIAN_CONFIG"


def obsidian_config_path() -> Path:
    """Location of ``obsidian.json`` for this platform."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()

    home = Path.home()
    if sys.platform == "darwin":
        base = home / "Library" / "Application Support"
    elif sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA") or home / "AppData" / "Roaming")
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config")
    return base / "obsidian" / "obsidian.json"


def discover_vaults(config_path: Path | None = None) -> dict[str, Path]:
    """Vaults registered with Obsidian, keyed by directory name.

    A missing config means no vaults. When two registered vaults share a
    directory name the first one listed wins.

    Raises:
        ValueError: the config exists but is not valid JSON, or is not
            shaped like an Obsidian config.
    """
    path = config_path or obsidian_config_path()
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid Obsidian config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"invalid Obsidian config {path}: expected a JSON object")
    entries = data.get("vaults") or {}
    if not isinstance(entries, dict):
        raise ValueError(f"invalid Obsidian config {path}: \"vaults\" is not an object")

    vaults: dict[str, Path] = {}
    for entry in entries.values():
        raw = entry.get("path") if isinstance(entry, dict) else None
        if not raw:
            continue
        vault_dir = Path(raw)
        vaults.setdefault(vault_dir.name, vault_dir)
    return vaults


def resolve_vault(name: str, config_path: Path | None = None) -> Path:
    """Map a vault name or directory path to an absolute vault directory.

    Raises:
        VaultNotFoundError: the name is neither a directory nor a registered
            vault, or the registered directory is gone.
        ValueError: the Obsidian config is malformed.
    """
    direct = Path(name).expanduser()
    if direct.is_dir():
        return direct.absolute()

    vaults = discover_vaults(config_path)
    if name not in vaults:
        raise VaultNotFoundError(name)

    vault_dir = vaults[name]
    if not vault_dir.is_dir():
        raise VaultNotFoundError(name, f"directory does not exist: {vault_dir}")
    return vault_dir.absolute()
