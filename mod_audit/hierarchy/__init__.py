from .forest import AssetRecord, HierarchyForest, build_forest, resolve_parent
from .render import render_forest

__all__ = [
    "AssetRecord",
    "HierarchyForest",
    "build_forest",
    "resolve_parent",
    "render_forest",
]
