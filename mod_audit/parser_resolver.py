"""Shared external-tool path resolution.

Two binaries do the format work: ``AssetParser`` (UAssetAPI based, reports
export classes and blueprint parents) and ``repak`` (lists and extracts pak members).

Resolution order for each:
1. Environment variable / config.json (see core.config)
2. local_config.json next to the package
3. ``PATH``
"""

import json
import os
import shutil
from pathlib import Path


def _from_local_config(local_config_dir: Path, key: str) -> str | None:
    local_config_path = local_config_dir / "local_config.json"
    if not local_config_path.exists():
        return None
    try:
        with open(local_config_path, "r") as f:
            local_config = json.load(f)
    except (json.JSONDecodeError, IOError):
        return None
    candidate = local_config.get(key)
    if candidate and os.path.exists(candidate):
        return candidate
    return None


def resolve_parser_path(local_config_dir: Path | None = None) -> str | None:
    """Resolve the AssetParser binary path, or None if not found."""
    from mod_audit.core.config import get_setting

    if local_config_dir is None:
        local_config_dir = Path(__file__).parent

    configured = get_setting("asset_parser_path")
    if configured and os.path.exists(configured):
        return configured

    return (
        _from_local_config(local_config_dir, "asset_parser_path")
        or shutil.which("AssetParser")
    )


def resolve_repak_path(local_config_dir: Path | None = None) -> str | None:
    """Resolve the repak binary path, or None if not found."""
    from mod_audit.core.config import get_setting

    if local_config_dir is None:
        local_config_dir = Path(__file__).parent

    configured = get_setting("repak_path")
    if configured and os.path.exists(configured):
        return configured

    return _from_local_config(local_config_dir, "repak_path") or shutil.which("repak")
