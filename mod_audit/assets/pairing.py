"""Extension lint and ``.uasset``/``.uexp`` pairing.

Cooked assets are split in two: the package header (``.uasset`` or ``.umap``)
and the export data (``.uexp``). A pak that ships one half without the other
crashes the game on load, so a missing companion is reported, never raised.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from mod_audit.audit_profile import AuditProfile
from mod_audit.pathutil import join_mount, split_extension

PRIMARY_EXTENSIONS = ("uasset", "umap")
EXPORT_EXTENSION = "uexp"


@dataclass(frozen=True)
class ContainerEntry:
    """One pak member, split into stem and extension."""

    raw_path: str
    extension: Optional[str] = None

    @classmethod
    def from_path(cls, path: str) -> "ContainerEntry":
        return cls(raw_path=path, extension=split_extension(path)[1])

    @property
    def stem(self) -> str:
        return split_extension(self.raw_path)[0]


@dataclass(frozen=True)
class CompletePair:
    """A stem with both a primary package file and its ``.uexp``."""

    stem: str
    primary_extension: str
    mount_path: str

    @property
    def primary_path(self) -> str:
        return f"{self.stem}.{self.primary_extension}"

    @property
    def export_path(self) -> str:
        return f"{self.stem}.{EXPORT_EXTENSION}"


@dataclass
class PairingResult:
    extraneous: list[str] = field(default_factory=list)
    split_pairs: list[str] = field(default_factory=list)
    complete_pairs: list[CompletePair] = field(default_factory=list)


def group_by_stem(entries: Iterable[ContainerEntry]) -> dict[str, set[str]]:
    """Map each stem to the set of extensions present under it.

    Entries without an extension have no stem group.
    """
    extensions: dict[str, set[str]] = {}
    for entry in entries:
        if entry.extension is None:
            continue
        extensions.setdefault(entry.stem, set()).add(entry.extension)
    return extensions


def analyze_entries(
    files: Iterable[str], profile: AuditProfile, mount: str = ""
) -> PairingResult:
    """Lint a pak listing.

    Args:
        files: Member paths relative to the pak mount point.
        profile: Supplies the extension allow-list and exempt paths.
        mount: Sanitized mount point; reported paths are joined onto it.

    Returns:
        PairingResult with sorted extraneous files, sorted split-pair paths and
        complete pairs ordered by mount path.
    """
    entries = [ContainerEntry.from_path(f) for f in files]

    extraneous = set()
    for entry in entries:
        if entry.extension is None or entry.extension not in profile.valid_extensions:
            extraneous.add(join_mount(mount, entry.raw_path))
    extraneous -= profile.exempt_paths

    result = PairingResult(extraneous=sorted(extraneous))

    split_pairs = set()
    for stem, exts in group_by_stem(entries).items():
        has_primary = any(e in exts for e in PRIMARY_EXTENSIONS)
        has_export = EXPORT_EXTENSION in exts
        if has_primary != has_export:
            for ext in exts:
                split_pairs.add(join_mount(mount, f"{stem}.{ext}"))
        elif has_primary:
            primary = next(e for e in PRIMARY_EXTENSIONS if e in exts)
            result.complete_pairs.append(
                CompletePair(stem=stem, primary_extension=primary, mount_path=join_mount(mount, stem))
            )

    result.split_pairs = sorted(split_pairs)
    result.complete_pairs.sort(key=lambda p: p.mount_path)
    return result
