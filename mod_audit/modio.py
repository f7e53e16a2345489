"""Discovery of mods installed through the mod.io client.

Layout under the mod.io directory:

    <game_id>/metadata/state.json   {"Mods": [{"ID": 123, "Profile": {"name": ...}}]}
    <game_id>/mods/<mod_id>/...     extracted mod files, a .pak somewhere inside
"""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Callable, Optional

from mod_audit.container import ContainerError, find_pak, open_container
from mod_audit.ownership import ContainerListing, normalized_listing
from mod_audit.pathutil import InvalidMountPointError

logger = logging.getLogger("mod-audit")


def get_modio_dir(steam_app_id: Optional[str] = None) -> Path:
    """Default mod.io directory for this platform.

    On Linux the game runs under Proton, so mod.io lives inside the Steam
    compatdata prefix of the game's app id.

    Raises:
        ValueError: unsupported platform, or Linux without a Steam app id.
    """
    system = platform.system()
    if system == "Windows":
        return Path("C:/Users/Public/mod.io")
    if system == "Linux":
        if not steam_app_id:
            raise ValueError("a Steam app id is required to locate mod.io under Proton")
        return (
            Path(os.path.expanduser("~"))
            / ".local/share/Steam/steamapps/compatdata"
            / str(steam_app_id)
            / "pfx/drive_c/users/Public/mod.io"
        )
    raise ValueError(f"unrecognized os: {system}")


def load_mod_names(state_path: Path) -> dict[str, str]:
    """Map mod id -> display name from the client's state.json.

    Raises:
        ValueError: the file is not JSON or not shaped like a state file.
    """
    with open(state_path, "r", encoding="utf-8") as f:
        state = json.load(f)
    if not isinstance(state, dict) or not isinstance(state.get("Mods", []), list):
        raise ValueError(f"Unexpected state.json layout in {state_path}")
    names = {}
    for mod in state.get("Mods", []):
        try:
            names[str(mod["ID"])] = mod["Profile"]["name"]
        except (KeyError, TypeError):
            logger.debug("ignoring malformed state entry: %r", mod)
    return names


def collect_listings(
    modio_dir: Path,
    game_id: str,
    opener: Callable = open_container,
) -> list[ContainerListing]:
    """List the normalized game paths of every installed mod.

    Mods whose pak is missing or unreadable are logged and skipped.

    Raises:
        FileNotFoundError: state.json or the mods directory is missing.
        ValueError: state.json is malformed.
    """
    game_dir = Path(modio_dir) / str(game_id)
    names = load_mod_names(game_dir / "metadata" / "state.json")
    mods_dir = game_dir / "mods"
    if not mods_dir.is_dir():
        raise FileNotFoundError(f"No mods directory at {mods_dir}")

    listings = []
    for mod_dir in sorted(mods_dir.iterdir(), key=lambda p: p.name):
        if not mod_dir.is_dir():
            continue
        mod_id = mod_dir.name
        if not mod_id.isdigit():
            logger.warning("skipping %s: not a mod id", mod_dir)
            continue

        try:
            pak = find_pak(mod_dir)
        except OSError as e:
            logger.error("error reading %s: %s", mod_dir, e)
            continue
        if pak is None:
            logger.warning("could not find .pak in %s", mod_dir)
            continue

        try:
            with opener(pak) as container:
                paths = normalized_listing(container)
        except (ContainerError, InvalidMountPointError) as e:
            logger.error("error reading %s: %s", pak, e)
            continue

        listings.append(
            ContainerListing(
                container_id=mod_id,
                display_name=names.get(mod_id, "unknown"),
                paths=tuple(paths),
            )
        )
    return listings
