"""Tests for assets/tables.py: package index resolution and class lookup."""

import pytest

from mod_audit.assets.tables import (
    AssetParseError,
    PackageTables,
    get_class_name,
    get_superclass,
)

from conftest import tables_json


class TestPackageTables:
    def test_index_resolution(self):
        tables = PackageTables.from_json(tables_json("Texture2D"))
        assert tables.get_import(-1).object_name == "Texture2D"
        assert tables.get_import(-2).object_name == "/Script/Engine"
        assert tables.get_import(-3) is None
        assert tables.get_import(1) is None
        assert tables.get_export(1).object_name == "Root"
        assert tables.get_export(0) is None
        assert tables.resolve(0) is None

    def test_short_name_and_outer(self):
        tables = PackageTables.from_json(tables_json("Texture2D"))
        assert tables.short_name(-1) == "Texture2D"
        assert tables.outer_of(-1) == -2
        assert tables.outer_of(-2) == 0
        assert tables.short_name(42) is None

    def test_root_export_skips_inner_objects(self):
        tables = PackageTables.from_json(
            {
                "imports": [{"object_name": "Material", "outer_index": 0}],
                "exports": [
                    {"object_name": "Inner", "class_index": -1, "outer_index": 2},
                    {"object_name": "Outer", "class_index": -1, "outer_index": 0},
                ],
            }
        )
        assert tables.root_export().object_name == "Outer"

    def test_missing_export_table_raises(self):
        with pytest.raises(AssetParseError):
            PackageTables.from_json({"imports": []})

    def test_malformed_entry_raises(self):
        with pytest.raises(AssetParseError, match="malformed"):
            PackageTables.from_json({"exports": [{"class_index": -1}]})

    def test_non_dict_raises(self):
        with pytest.raises(AssetParseError):
            PackageTables.from_json(["not", "tables"])


# ---------------------------------------------------------------------------
# get_class_name
# ---------------------------------------------------------------------------


class TestGetClassName:
    def test_root_export_class(self):
        tables = PackageTables.from_json(tables_json("SoundWave"))
        assert get_class_name(tables) == "SoundWave"

    def test_no_root_export(self):
        tables = PackageTables.from_json(
            {"exports": [{"object_name": "X", "class_index": -1, "outer_index": 1}]}
        )
        with pytest.raises(AssetParseError, match="could not determine asset class"):
            get_class_name(tables)

    def test_class_not_an_import(self):
        tables = PackageTables.from_json(
            {"exports": [{"object_name": "X", "class_index": 0, "outer_index": 0}]}
        )
        with pytest.raises(AssetParseError, match="missing class import"):
            get_class_name(tables)


# ---------------------------------------------------------------------------
# get_superclass
# ---------------------------------------------------------------------------


class TestGetSuperclass:
    def test_no_superclass(self):
        tables = PackageTables.from_json(tables_json("Texture2D"))
        assert get_superclass(tables) is None

    def test_qualified_label_outer_to_inner(self):
        tables = PackageTables.from_json(
            tables_json("BlueprintGeneratedClass", "/Game/Weapons/BP_Base")
        )
        ref = get_superclass(tables)
        assert ref.label == "/Game/Weapons/BP_Base.BP_Base_C"
        assert ref.package == "/Game/Weapons/BP_Base"

    def test_engine_superclass(self):
        tables = PackageTables.from_json(
            {
                "imports": [
                    {"object_name": "BlueprintGeneratedClass", "outer_index": 0},
                    {"object_name": "Actor", "outer_index": -3},
                    {"object_name": "/Script/Engine", "outer_index": 0},
                ],
                "exports": [
                    {"object_name": "BP_C", "class_index": -1, "super_index": -2, "outer_index": 0}
                ],
            }
        )
        ref = get_superclass(tables)
        assert ref.label == "/Script/Engine.Actor"
        assert ref.package == "/Script/Engine"

    def test_same_short_name_different_scope(self):
        def tables_with_outer(package):
            return PackageTables.from_json(
                {
                    "imports": [
                        {"object_name": "BlueprintGeneratedClass", "outer_index": 0},
                        {"object_name": "Base_C", "outer_index": -3},
                        {"object_name": package, "outer_index": 0},
                    ],
                    "exports": [
                        {"object_name": "X", "class_index": -1, "super_index": -2, "outer_index": 0}
                    ],
                }
            )

        a = get_superclass(tables_with_outer("/Game/A/Base"))
        b = get_superclass(tables_with_outer("/Game/B/Base"))
        assert a.label != b.label

    def test_dangling_index_raises(self):
        tables = PackageTables.from_json(
            {
                "imports": [{"object_name": "Class", "outer_index": 0}],
                "exports": [
                    {"object_name": "X", "class_index": -1, "super_index": -9, "outer_index": 0}
                ],
            }
        )
        with pytest.raises(AssetParseError, match="dangling"):
            get_superclass(tables)

    def test_looping_outer_chain_raises(self):
        tables = PackageTables.from_json(
            {
                "imports": [
                    {"object_name": "Class", "outer_index": 0},
                    {"object_name": "A", "outer_index": -3},
                    {"object_name": "B", "outer_index": -2},
                ],
                "exports": [
                    {"object_name": "X", "class_index": -1, "super_index": -2, "outer_index": 0}
                ],
            }
        )
        with pytest.raises(AssetParseError, match="does not terminate"):
            get_superclass(tables)
