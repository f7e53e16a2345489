"""Read-only view over an asset's import and export tables.

Unreal addresses objects with a signed package index:
    0   -> null
    > 0 -> exports[index - 1]
    < 0 -> imports[-index - 1]

Tables come either from a raw table dump (``PackageTables.from_json``) or are
rebuilt from AssetParser ``inspect``/``blueprint`` output
(``tables_from_inspect``). Either way this module answers what the audit
asks of the root export: its class and where its superclass lives.
"""

from dataclasses import dataclass
from typing import Optional, Union


class AssetParseError(RuntimeError):
    """The asset could not be parsed or its class could not be determined."""


@dataclass(frozen=True)
class ImportEntry:
    class_package: str
    class_name: str
    object_name: str
    outer_index: int = 0


@dataclass(frozen=True)
class ExportEntry:
    object_name: str
    class_index: int = 0
    super_index: int = 0
    outer_index: int = 0


@dataclass(frozen=True)
class SuperclassRef:
    """Where an asset's root export inherits from.

    ``label`` is the dotted outer-to-inner name (``/Game/A/BP_Base.BP_Base_C``)
    and ``package`` the outermost object, i.e. the package path that may match
    another asset of the same run.
    """

    label: str
    package: str


class PackageTables:
    """Immutable import/export tables of one parsed asset."""

    def __init__(self, imports=(), exports=()):
        self._imports: tuple[ImportEntry, ...] = tuple(imports)
        self._exports: tuple[ExportEntry, ...] = tuple(exports)

    @classmethod
    def from_json(cls, data: dict) -> "PackageTables":
        """Build from AssetParser ``tables`` output.

        Raises:
            AssetParseError: if the document is not shaped like a table dump.
        """
        if not isinstance(data, dict) or "exports" not in data:
            raise AssetParseError("parser output has no export table")
        try:
            imports = [
                ImportEntry(
                    class_package=i.get("class_package", ""),
                    class_name=i.get("class_name", ""),
                    object_name=i["object_name"],
                    outer_index=int(i.get("outer_index", 0)),
                )
                for i in data.get("imports", [])
            ]
            exports = [
                ExportEntry(
                    object_name=e["object_name"],
                    class_index=int(e.get("class_index", 0)),
                    super_index=int(e.get("super_index", 0)),
                    outer_index=int(e.get("outer_index", 0)),
                )
                for e in data["exports"]
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise AssetParseError(f"malformed parser output: {e}") from e
        return cls(imports, exports)

    @property
    def imports(self) -> tuple[ImportEntry, ...]:
        return self._imports

    @property
    def exports(self) -> tuple[ExportEntry, ...]:
        return self._exports

    def root_export(self) -> Optional[ExportEntry]:
        """First export with no outer object."""
        for export in self._exports:
            if export.outer_index == 0:
                return export
        return None

    def get_import(self, index: int) -> Optional[ImportEntry]:
        if index < 0 and -index <= len(self._imports):
            return self._imports[-index - 1]
        return None

    def get_export(self, index: int) -> Optional[ExportEntry]:
        if 0 < index <= len(self._exports):
            return self._exports[index - 1]
        return None

    def resolve(self, index: int) -> Optional[Union[ImportEntry, ExportEntry]]:
        if index < 0:
            return self.get_import(index)
        return self.get_export(index)

    def short_name(self, index: int) -> Optional[str]:
        entry = self.resolve(index)
        return entry.object_name if entry else None

    def outer_of(self, index: int) -> int:
        entry = self.resolve(index)
        return entry.outer_index if entry else 0


def get_class_name(tables: PackageTables) -> str:
    """Class of the asset's root export, e.g. ``Texture2D``.

    Raises:
        AssetParseError: no root export, or its class import is missing.
    """
    root = tables.root_export()
    if root is None:
        raise AssetParseError("could not determine asset class")
    class_import = tables.get_import(root.class_index)
    if class_import is None:
        raise AssetParseError("missing class import")
    return class_import.object_name


def get_superclass(tables: PackageTables) -> Optional[SuperclassRef]:
    """Follow the root export's super reference up through its outers.

    Returns None when the root export has no superclass.

    Raises:
        AssetParseError: on a dangling index or an outer chain that loops.
    """
    root = tables.root_export()
    if root is None or root.super_index == 0:
        return None

    names = []
    index = root.super_index
    limit = len(tables.imports) + len(tables.exports)
    while index != 0:
        name = tables.short_name(index)
        if name is None:
            raise AssetParseError(f"dangling package index {index}")
        names.append(name)
        if len(names) > limit:
            raise AssetParseError("outer chain does not terminate")
        index = tables.outer_of(index)

    names.reverse()
    return SuperclassRef(label=".".join(names), package=names[0])


# ---------------------------------------------------------------------------
# AssetParser inspect/blueprint output -> PackageTables
# ---------------------------------------------------------------------------

_METADATA_EXPORT_TYPES = ("MetaDataExport",)


def main_export(inspect_doc: dict) -> Optional[dict]:
    """First export that is not package metadata, as ``inspect`` lists them."""
    for export in inspect_doc.get("exports", []):
        if (
            export.get("type") not in _METADATA_EXPORT_TYPES
            and export.get("name") != "PackageMetaData"
        ):
            return export
    return None


def _parent_chain(parent: str) -> list[str]:
    """Outer-to-inner names of a blueprint parent reference.

    ``/Game/A/BP_Base.BP_Base_C`` -> [``/Game/A/BP_Base``, ``BP_Base_C``]
    ``/Game/A/BP_Base_C``         -> [``/Game/A/BP_Base``, ``BP_Base_C``]
    ``/Script/Engine.Actor``      -> [``/Script/Engine``, ``Actor``]
    ``Actor``                     -> [``Actor``]
    """
    package, dot, obj = parent.partition(".")
    if dot:
        return [package, obj]
    if package.startswith("/") and package.endswith("_C"):
        return [package[:-2], package.rsplit("/", 1)[-1]]
    return [package]


def tables_from_inspect(inspect_doc: dict, parent: Optional[str] = None) -> PackageTables:
    """Rebuild the tables the audit needs from ``inspect`` (and ``blueprint``) output.

    ``inspect`` names the class of each export but not the package indices, so
    the root export is the main export and the class and parent become
    imports: ``-1`` the class, then the parent object and its outers.

    Raises:
        AssetParseError: the document carries an error or no usable export.
    """
    if not isinstance(inspect_doc, dict):
        raise AssetParseError("parser output is not an object")
    if "error" in inspect_doc:
        raise AssetParseError(str(inspect_doc["error"]))

    export = main_export(inspect_doc)
    if export is None or not export.get("class"):
        raise AssetParseError("could not determine asset class")

    imports = [ImportEntry("", "Class", export["class"], 0)]
    super_index = 0
    if parent:
        chain = _parent_chain(parent)
        # innermost first: each entry's outer is the next import
        for depth, name in enumerate(reversed(chain)):
            outer = -(len(imports) + 2) if depth < len(chain) - 1 else 0
            imports.append(ImportEntry("", "", name, outer))
        super_index = -2

    root = ExportEntry(
        object_name=export.get("name", ""),
        class_index=-1,
        super_index=super_index,
        outer_index=0,
    )
    return PackageTables(imports, [root])
