"""Cross-mod ownership index: which installed mods touch the same game path.

Two mods replacing the same asset cannot both win; the later mount silently
overrides the earlier one. Paths are compared after normalization so
``FSD/Content/X.uasset`` and ``FSD/Content/X.uexp`` both count as ``/Game/X``.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from mod_audit.pathutil import (
    PathNormalizationError,
    join_mount,
    normalize_game_path,
    strip_extension,
    strip_mount_point,
)

logger = logging.getLogger("mod-audit")


@dataclass(frozen=True)
class ContainerListing:
    container_id: str
    display_name: str
    paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class Owner:
    container_id: str
    display_name: str


def _id_key(container_id: str) -> tuple:
    # mod.io ids are numeric; sort them numerically, anything else after
    if container_id.isdigit():
        return (0, int(container_id), container_id)
    return (1, 0, container_id)


def normalized_listing(container) -> list[str]:
    """Derive the sorted set of game paths a container touches.

    Raises:
        InvalidMountPointError: the container mount point lacks ``../../../``.
    """
    sanitized = strip_mount_point(container.mount_point)
    paths = set()
    for member in container.files():
        relative = strip_extension(join_mount(sanitized, member))
        try:
            paths.add(normalize_game_path(relative))
        except PathNormalizationError as e:
            logger.debug("skipping %s: %s", member, e)
    return sorted(paths)


class OwnershipIndex:
    """Game path -> owning containers."""

    def __init__(self):
        self._owners: dict[str, dict[str, str]] = {}

    def add(self, listing: ContainerListing) -> None:
        for path in listing.paths:
            self._owners.setdefault(path, {})[listing.container_id] = listing.display_name

    def owners(self, path: str) -> list[Owner]:
        found = self._owners.get(path, {})
        return [
            Owner(container_id=cid, display_name=found[cid])
            for cid in sorted(found, key=_id_key)
        ]

    def entries(self) -> list[tuple[str, list[Owner]]]:
        """All paths, fewest owners first, ties broken by path."""
        ordered = sorted(self._owners, key=lambda p: (len(self._owners[p]), p))
        return [(path, self.owners(path)) for path in ordered]

    def contested(self) -> list[tuple[str, list[Owner]]]:
        return [(path, owners) for path, owners in self.entries() if len(owners) > 1]

    def __len__(self) -> int:
        return len(self._owners)

    def to_dict(self, contested_only: bool = False) -> list[dict]:
        rows = self.contested() if contested_only else self.entries()
        return [
            {
                "path": path,
                "owners": [
                    {"id": o.container_id, "name": o.display_name} for o in owners
                ],
            }
            for path, owners in rows
        ]


def build_ownership_index(listings: Iterable[ContainerListing]) -> OwnershipIndex:
    index = OwnershipIndex()
    for listing in listings:
        index.add(listing)
    return index


def format_ownership_report(
    index: OwnershipIndex, contested_only: bool = False
) -> list[str]:
    lines = []
    rows = index.contested() if contested_only else index.entries()
    for path, owners in rows:
        lines.append(path)
        lines.append("\tmodified by:")
        for owner in owners:
            lines.append(f"\t{owner.container_id} ({owner.display_name})")
    return lines
