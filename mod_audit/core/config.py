import os
import json
import sys
from typing import Optional

# Set to True (or MOD_AUDIT_DEBUG=1) to see parser/repak commands and skipped files
DEBUG = os.environ.get("MOD_AUDIT_DEBUG", "").lower() in ("1", "true", "yes")

_CORE_DIR = os.path.dirname(__file__)
_TOOL_DIR = os.path.dirname(_CORE_DIR)
CONFIG_FILE = os.path.join(_TOOL_DIR, "config.json")

# Environment overrides for config.json keys
_ENV_OVERRIDES = {
    "profile": "MOD_AUDIT_PROFILE",
    "modio_dir": "MOD_AUDIT_MODIO_DIR",
    "asset_parser_path": "MOD_AUDIT_ASSET_PARSER",
    "repak_path": "MOD_AUDIT_REPAK",
    "cache_dir": "MOD_AUDIT_CACHE_DIR",
}

DEFAULT_CACHE_DIR = os.path.join(os.path.expanduser("~"), ".cache", "mod-audit")


def load_config(config_file: Optional[str] = None) -> dict:
    """Load config.json, returning an empty dict if it is missing or unreadable."""
    path = config_file or CONFIG_FILE
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r") as f:
            config = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        if DEBUG:
            print(f"[DEBUG] Failed to load config: {e}", file=sys.stderr)
        return {}
    return config if isinstance(config, dict) else {}


def get_setting(key: str, default=None, config_file: Optional[str] = None):
    """Resolve a setting: environment variable > config.json > default."""
    env_name = _ENV_OVERRIDES.get(key)
    if env_name:
        value = os.environ.get(env_name)
        if value:
            return value
    return load_config(config_file).get(key, default)


def get_asset_timeout() -> int:
    """Resolve single-asset parser timeout from env with a safe fallback."""
    raw = os.environ.get("MOD_AUDIT_ASSET_TIMEOUT", "60")
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return 60


def get_cache_dir() -> str:
    return get_setting("cache_dir") or DEFAULT_CACHE_DIR
