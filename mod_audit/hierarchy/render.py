"""Box-drawing rendering of a HierarchyForest, ``tree``-command style."""

from .forest import HierarchyForest

BRANCH = "├── "
CORNER = "└── "
PIPE = "│   "
BLANK = "    "


def render_forest(forest: HierarchyForest) -> list[str]:
    """Render every root of the forest, one output line per node."""
    lines: list[str] = []
    for root in forest.roots:
        _render_node(forest, root, [], set(), lines)
    return lines


def _render_node(
    forest: HierarchyForest,
    node: str,
    last_flags: list[bool],
    ancestors: set[str],
    lines: list[str],
) -> None:
    # Ancestor columns: a vertical bar while that ancestor still has siblings below
    prefix = "".join(BLANK if last else PIPE for last in last_flags[:-1])
    if last_flags:
        prefix += CORNER if last_flags[-1] else BRANCH

    if node in ancestors:
        lines.append(f"{prefix}{node} (cycle)")
        return
    lines.append(prefix + node)

    ancestors.add(node)
    kids = forest.children.get(node, [])
    for i, child in enumerate(kids):
        last_flags.append(i == len(kids) - 1)
        _render_node(forest, child, last_flags, ancestors, lines)
        last_flags.pop()
    ancestors.discard(node)
