"""Shared fixtures: an in-memory container and table builders.

The fake container stores member bytes in a dict. For complete pairs the
``.uasset`` bytes hold the JSON that AssetParser ``tables`` would print, so
``json_extractor`` can stand in for the real parser.
"""

import json

import pytest

from mod_audit.assets.tables import PackageTables
from mod_audit.audit_profile import clear_cache, load_profile


class FakeContainer:
    def __init__(self, members: dict[str, bytes], mount_point: str = "../../../"):
        self.mount_point = mount_point
        self.members = dict(members)
        self.reads: list[str] = []

    def files(self) -> list[str]:
        return list(self.members)

    def read(self, path: str) -> bytes:
        self.reads.append(path)
        return self.members[path]


def tables_json(class_name: str, super_package: str | None = None) -> dict:
    """Tables for an asset whose root export is of class_name.

    With super_package, the root export derives from ``<name>_C`` inside that
    package, the way a child blueprint's generated class does.
    """
    imports = [
        {
            "class_package": "/Script/CoreUObject",
            "class_name": "Class",
            "object_name": class_name,
            "outer_index": -2,
        },
        {
            "class_package": "/Script/CoreUObject",
            "class_name": "Package",
            "object_name": "/Script/Engine",
            "outer_index": 0,
        },
    ]
    super_index = 0
    if super_package:
        imports.append(
            {
                "class_package": "/Script/Engine",
                "class_name": "BlueprintGeneratedClass",
                "object_name": super_package.rsplit("/", 1)[-1] + "_C",
                "outer_index": -4,
            }
        )
        imports.append(
            {
                "class_package": "/Script/CoreUObject",
                "class_name": "Package",
                "object_name": super_package,
                "outer_index": 0,
            }
        )
        super_index = -3
    return {
        "imports": imports,
        "exports": [
            {
                "object_name": "Root",
                "class_index": -1,
                "super_index": super_index,
                "outer_index": 0,
            }
        ],
    }


def asset_pair(stem: str, class_name: str, super_package: str | None = None) -> dict[str, bytes]:
    return {
        f"{stem}.uasset": json.dumps(tables_json(class_name, super_package)).encode(),
        f"{stem}.uexp": b"\x00",
    }


def json_extractor(primary: bytes, export: bytes, **kwargs) -> PackageTables:
    return PackageTables.from_json(json.loads(primary))


@pytest.fixture(autouse=True)
def _clear_profile_cache():
    """Ensure a clean profile cache for every test."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def drg_profile():
    return load_profile("drg")
