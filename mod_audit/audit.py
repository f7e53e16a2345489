"""Single-pak audit: lint, extract classes, build the hierarchy, classify.

Flow:
    listing -> analyze_entries -> complete pairs
            -> normalize_game_path -> extractor (one call per pair, isolated)
            -> AssetRecords -> build_forest / render_forest
            -> build_verification_rows
"""

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Callable, Optional

from mod_audit.assets.pairing import CompletePair, analyze_entries
from mod_audit.assets.tables import (
    AssetParseError,
    PackageTables,
    SuperclassRef,
    get_class_name,
    get_superclass,
)
from mod_audit.audit_profile import AuditProfile
from mod_audit.container import open_container
from mod_audit.hierarchy import (
    AssetRecord,
    HierarchyForest,
    build_forest,
    render_forest,
    resolve_parent,
)
from mod_audit.pathutil import (
    PathNormalizationError,
    normalize_game_path,
    strip_mount_point,
)
from mod_audit.remote import fetch_container, is_remote_reference
from mod_audit.verify import (
    ClassResult,
    Tier,
    VerificationRow,
    build_verification_rows,
    format_verification_table,
)

logger = logging.getLogger("mod-audit")

# (primary_bytes, export_bytes, name, primary_extension) -> PackageTables
Extractor = Callable[..., PackageTables]


@dataclass
class AuditReport:
    container: str
    mount_point: str
    extraneous: list[str] = field(default_factory=list)
    split_pairs: list[str] = field(default_factory=list)
    unmapped: list[str] = field(default_factory=list)
    # game paths claimed by more than one pair
    collisions: list[str] = field(default_factory=list)
    records: list[AssetRecord] = field(default_factory=list)
    forest: HierarchyForest = field(default_factory=HierarchyForest)
    tree: list[str] = field(default_factory=list)
    rows: list[VerificationRow] = field(default_factory=list)

    @property
    def auto_verified(self) -> bool:
        """True when every asset passed and nothing structural was flagged."""
        return (
            bool(self.rows)
            and all(r.tier is Tier.PASS for r in self.rows)
            and not (
                self.extraneous
                or self.split_pairs
                or self.collisions
                or self.forest.cycles
            )
        )

    def to_dict(self) -> dict:
        return {
            "container": self.container,
            "mount_point": self.mount_point,
            "extraneous_files": list(self.extraneous),
            "split_pairs": list(self.split_pairs),
            "unmapped": list(self.unmapped),
            "collisions": list(self.collisions),
            "hierarchy": self.forest.to_dict(),
            "assets": [
                {
                    "path": r.full_path,
                    "class": r.class_name,
                    "parent": r.parent_full_path,
                    "parent_label": r.parent_label,
                }
                for r in self.records
            ],
            "verification": [row.to_dict() for row in self.rows],
            "auto_verified": self.auto_verified,
        }


def _describe_pair(
    container, pair: CompletePair, extractor: Extractor
) -> tuple[ClassResult, Optional[SuperclassRef]]:
    """Read and parse one pair, turning any failure into an error result.

    A malformed asset can make the parser misbehave in arbitrary ways; that
    must cost one Unknown row, not the whole run.
    """
    try:
        primary = container.read(pair.primary_path)
        export = container.read(pair.export_path)
    except Exception as e:
        logger.debug("read failed for %s: %s", pair.stem, e)
        return AssetParseError(f"failed to read asset: {e}"), None

    try:
        tables = extractor(
            primary,
            export,
            name=posixpath.basename(pair.stem),
            primary_extension=pair.primary_extension,
        )
        class_name = get_class_name(tables)
    except AssetParseError as e:
        return e, None
    except Exception as e:
        logger.debug("extractor crashed on %s", pair.stem, exc_info=True)
        return AssetParseError(f"failed to parse asset ({type(e).__name__})"), None

    try:
        superclass = get_superclass(tables)
    except AssetParseError as e:
        logger.warning("%s: superclass not resolvable: %s", pair.mount_path, e)
        superclass = None
    return class_name, superclass


def run_audit(
    container,
    profile: AuditProfile,
    extractor: Extractor,
    name: str = "",
) -> AuditReport:
    """Audit an open container.

    Raises:
        InvalidMountPointError: mount point lacks ``../../../``.
        ContainerError: the listing could not be read.
    """
    mount_point = container.mount_point
    sanitized = strip_mount_point(mount_point)
    files = container.files()

    pairing = analyze_entries(files, profile, sanitized)
    report = AuditReport(
        container=name,
        mount_point=mount_point,
        extraneous=pairing.extraneous,
        split_pairs=pairing.split_pairs,
    )

    results: dict[str, ClassResult] = {}
    superclasses: dict[str, Optional[SuperclassRef]] = {}
    claimed: dict[str, str] = {}
    collisions = set()
    for pair in pairing.complete_pairs:
        try:
            full_path = normalize_game_path(pair.mount_path)
        except PathNormalizationError as e:
            logger.warning("excluding %s: %s", pair.mount_path, e)
            report.unmapped.append(pair.mount_path)
            continue

        if full_path in claimed:
            # Duplicate keeps its own row, keyed by mount path
            logger.warning(
                "%s maps to %s, already provided by %s",
                pair.mount_path,
                full_path,
                claimed[full_path],
            )
            collisions.add(full_path)
            results[pair.mount_path] = AssetParseError(
                f"game path {full_path} already provided by {claimed[full_path]}"
            )
            continue
        claimed[full_path] = pair.mount_path

        results[full_path], superclasses[full_path] = _describe_pair(
            container, pair, extractor
        )

    report.collisions = sorted(collisions)

    known = {path for path, result in results.items() if isinstance(result, str)}
    for path in sorted(known):
        parent, label = resolve_parent(superclasses[path], known)
        report.records.append(
            AssetRecord(
                full_path=path,
                class_name=results[path],
                parent_full_path=parent,
                parent_label=label,
            )
        )

    report.forest = build_forest(report.records)
    report.tree = render_forest(report.forest)
    report.rows = build_verification_rows(results, profile.auto_verified_classes)
    return report


def audit_reference(
    reference: str,
    profile: AuditProfile,
    extractor: Extractor,
    repak_path: Optional[str] = None,
) -> AuditReport:
    """Audit a local ``.pak``/``.zip`` path or an ``http(s)://`` URL.

    Raises:
        ContainerError: download, open or listing failed.
        InvalidMountPointError: mount point lacks ``../../../``.
    """
    local = reference
    if is_remote_reference(reference):
        local = str(fetch_container(reference))

    with open_container(local, repak_path) as container:
        return run_audit(container, profile, extractor, name=reference)


def format_report(report: AuditReport) -> list[str]:
    """Plain-text report, sections in fixed order."""
    lines = []
    if report.extraneous:
        lines.append("extraneous files:")
        lines.extend(f"\t{f}" for f in report.extraneous)

    lines.append("class hierarchy:")
    lines.extend(f"\t{line}" for line in report.tree)

    if report.forest.cycles:
        lines.append("cycles detected:")
        lines.extend(f"\t{node}" for node in report.forest.cycles)

    if report.split_pairs:
        lines.append("split asset pairs:")
        lines.extend(f"\t{f}" for f in report.split_pairs)

    if report.collisions:
        lines.append("colliding game paths:")
        lines.extend(f"\t{p}" for p in report.collisions)

    lines.extend(format_verification_table(report.rows))
    return lines
