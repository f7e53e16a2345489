from .pairing import (
    ContainerEntry,
    CompletePair,
    PairingResult,
    analyze_entries,
    group_by_stem,
)
from .tables import (
    AssetParseError,
    ImportEntry,
    ExportEntry,
    PackageTables,
    SuperclassRef,
    get_class_name,
    get_superclass,
    main_export,
    tables_from_inspect,
)
from .extractor import AssetParserExtractor

__all__ = [
    "ContainerEntry",
    "CompletePair",
    "PairingResult",
    "analyze_entries",
    "group_by_stem",
    "AssetParseError",
    "ImportEntry",
    "ExportEntry",
    "PackageTables",
    "SuperclassRef",
    "get_class_name",
    "get_superclass",
    "main_export",
    "tables_from_inspect",
    "AssetParserExtractor",
]
