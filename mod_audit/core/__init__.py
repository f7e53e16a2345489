from .config import (
    DEBUG,
    CONFIG_FILE,
    load_config,
    get_setting,
    get_asset_timeout,
    get_cache_dir,
)

__all__ = [
    "DEBUG",
    "CONFIG_FILE",
    "load_config",
    "get_setting",
    "get_asset_timeout",
    "get_cache_dir",
]
