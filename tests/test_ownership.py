"""Tests for ownership.py: normalized listings and the cross-mod index."""

import pytest

from mod_audit.ownership import (
    ContainerListing,
    OwnershipIndex,
    build_ownership_index,
    format_ownership_report,
    normalized_listing,
)
from mod_audit.pathutil import InvalidMountPointError

from conftest import FakeContainer


class TestNormalizedListing:
    def test_pair_collapses_to_one_path(self):
        container = FakeContainer(
            {"FSD/Content/X.uasset": b"", "FSD/Content/X.uexp": b"", "FSD/Content/X.ubulk": b""}
        )
        assert normalized_listing(container) == ["/Game/X"]

    def test_nested_mount(self):
        container = FakeContainer({"Content/UI/W.uasset": b""}, mount_point="../../../FSD/")
        assert normalized_listing(container) == ["/Game/UI/W"]

    def test_non_game_members_skipped(self):
        container = FakeContainer({"FSD/AssetRegistry.bin": b"", "FSD/Content/A.uasset": b""})
        assert normalized_listing(container) == ["/Game/A"]

    def test_sorted(self):
        container = FakeContainer({"FSD/Content/B.uasset": b"", "FSD/Content/A.uasset": b""})
        assert normalized_listing(container) == ["/Game/A", "/Game/B"]

    def test_invalid_mount_raises(self):
        container = FakeContainer({"FSD/Content/A.uasset": b""}, mount_point="/")
        with pytest.raises(InvalidMountPointError):
            normalized_listing(container)


# ---------------------------------------------------------------------------
# OwnershipIndex
# ---------------------------------------------------------------------------


ALPHA = ContainerListing("100", "Alpha", ("/Game/X", "/Game/A"))
BETA = ContainerListing("25", "Beta", ("/Game/X",))


class TestOwnershipIndex:
    @pytest.mark.parametrize("listings", [[ALPHA, BETA], [BETA, ALPHA]])
    def test_contested_path_independent_of_insertion_order(self, listings):
        index = build_ownership_index(listings)
        owners = index.owners("/Game/X")
        assert [(o.container_id, o.display_name) for o in owners] == [
            ("25", "Beta"),
            ("100", "Alpha"),
        ]

    def test_entries_fewest_owners_first(self):
        index = build_ownership_index([ALPHA, BETA])
        assert [path for path, _ in index.entries()] == ["/Game/A", "/Game/X"]

    def test_contested(self):
        index = build_ownership_index([ALPHA, BETA])
        assert [path for path, _ in index.contested()] == ["/Game/X"]

    def test_same_mod_counted_once(self):
        index = OwnershipIndex()
        index.add(ALPHA)
        index.add(ALPHA)
        assert len(index.owners("/Game/X")) == 1
        assert len(index) == 2

    def test_unknown_path(self):
        assert OwnershipIndex().owners("/Game/Nope") == []

    def test_to_dict(self):
        index = build_ownership_index([ALPHA, BETA])
        assert index.to_dict(contested_only=True) == [
            {
                "path": "/Game/X",
                "owners": [{"id": "25", "name": "Beta"}, {"id": "100", "name": "Alpha"}],
            }
        ]


class TestFormatOwnershipReport:
    def test_layout(self):
        index = build_ownership_index([ALPHA, BETA])
        assert format_ownership_report(index) == [
            "/Game/A",
            "\tmodified by:",
            "\t100 (Alpha)",
            "/Game/X",
            "\tmodified by:",
            "\t25 (Beta)",
            "\t100 (Alpha)",
        ]

    def test_contested_only(self):
        index = build_ownership_index([ALPHA, BETA])
        lines = format_ownership_report(index, contested_only=True)
        assert lines[0] == "/Game/X"
        assert "/Game/A" not in lines

    def test_empty(self):
        assert format_ownership_report(OwnershipIndex()) == []
