"""Tests for hierarchy/render.py: box-drawing tree output."""

from mod_audit.hierarchy import AssetRecord, HierarchyForest, build_forest, render_forest


def _forest(*edges):
    return build_forest(
        AssetRecord(full_path=child, class_name="", parent_full_path=parent)
        for parent, child in edges
    )


class TestRenderForest:
    def test_chain(self):
        forest = _forest(("/Game/A", "/Game/B"), ("/Game/B", "/Game/C"))
        assert render_forest(forest) == [
            "/Game/A",
            "└── /Game/B",
            "    └── /Game/C",
        ]

    def test_siblings_use_branch_then_corner(self):
        forest = _forest(("/Game/A", "/Game/C"), ("/Game/A", "/Game/B"))
        assert render_forest(forest) == [
            "/Game/A",
            "├── /Game/B",
            "└── /Game/C",
        ]

    def test_pipe_continues_under_non_last_sibling(self):
        forest = _forest(
            ("/Game/A", "/Game/B"),
            ("/Game/A", "/Game/C"),
            ("/Game/B", "/Game/B1"),
            ("/Game/C", "/Game/C1"),
        )
        assert render_forest(forest) == [
            "/Game/A",
            "├── /Game/B",
            "│   └── /Game/B1",
            "└── /Game/C",
            "    └── /Game/C1",
        ]

    def test_multiple_roots(self):
        forest = _forest(("/Game/A", "/Game/A1"), ("/Game/B", "/Game/B1"))
        assert render_forest(forest) == [
            "/Game/A",
            "└── /Game/A1",
            "/Game/B",
            "└── /Game/B1",
        ]

    def test_empty_forest(self):
        assert render_forest(HierarchyForest()) == []

    def test_rendering_is_repeatable(self):
        records = [
            AssetRecord(full_path=child, class_name="", parent_full_path=parent)
            for parent, child in [
                ("/Game/A", "/Game/B"),
                ("/Game/A", "/Game/C"),
                ("/Game/B", "/Game/B1"),
                ("/Game/X", "/Game/X1"),
                ("/Game/A", "/Game/B"),
            ]
        ]
        shuffled = [records[i] for i in (3, 1, 4, 0, 2)]
        first = build_forest(records)
        second = build_forest(shuffled)
        assert render_forest(first) == render_forest(second)
        assert first.to_dict() == second.to_dict()

    def test_cycle_marker_stops_descent(self):
        forest = HierarchyForest(
            children={"/Game/A": ["/Game/B"], "/Game/B": ["/Game/A"]},
            roots=["/Game/A"],
        )
        assert render_forest(forest) == [
            "/Game/A",
            "└── /Game/B",
            "    └── /Game/A (cycle)",
        ]
