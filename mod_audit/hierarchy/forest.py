"""Blueprint inheritance forest built from per-asset parent references.

Only parents that are themselves assets of the same pak become edges. A
parent outside the pak (an engine class, a base-game blueprint) is kept on
the record as an informational label and never enters the forest, otherwise
it would show up as a spurious root.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from mod_audit.assets.tables import SuperclassRef


@dataclass(frozen=True)
class AssetRecord:
    full_path: str
    class_name: str
    parent_full_path: Optional[str] = None
    parent_label: Optional[str] = None


@dataclass
class HierarchyForest:
    # parent -> lexicographically sorted children
    children: dict[str, list[str]] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)
    # nodes on (or hanging off) a parent cycle, unreachable from any root
    cycles: list[str] = field(default_factory=list)

    def nodes(self) -> set[str]:
        found = set(self.children)
        for kids in self.children.values():
            found.update(kids)
        return found

    def to_dict(self) -> dict:
        return {
            "roots": list(self.roots),
            "children": {k: list(v) for k, v in sorted(self.children.items())},
            "cycles": list(self.cycles),
        }


def resolve_parent(
    superclass: Optional[SuperclassRef], known_paths: Iterable[str]
) -> tuple[Optional[str], Optional[str]]:
    """Split a superclass reference into (forest parent, qualified label).

    The forest parent is set only when the superclass package is one of
    known_paths; the label is set whenever there is a superclass.
    """
    if superclass is None:
        return None, None
    parent = superclass.package if superclass.package in set(known_paths) else None
    return parent, superclass.label


def build_forest(records: Iterable[AssetRecord]) -> HierarchyForest:
    edges: dict[str, set[str]] = {}
    for record in records:
        if record.parent_full_path:
            edges.setdefault(record.parent_full_path, set()).add(record.full_path)

    children = {parent: sorted(kids) for parent, kids in sorted(edges.items())}
    all_children = set()
    for kids in children.values():
        all_children.update(kids)
    roots = sorted(set(children) - all_children)

    forest = HierarchyForest(children=children, roots=roots)

    visited = set()
    pending = list(roots)
    while pending:
        node = pending.pop()
        if node in visited:
            continue
        visited.add(node)
        pending.extend(children.get(node, ()))

    forest.cycles = sorted(forest.nodes() - visited)
    return forest
