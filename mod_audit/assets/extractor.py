"""Metadata extraction through the AssetParser binary.

The parser works on files, so each pair is written to a scratch directory as
``<name>.uasset`` + ``<name>.uexp`` (UAssetAPI picks up the ``.uexp`` sibling
on its own). ``AssetParser inspect <file>`` gives the class of every export;
for blueprint classes ``AssetParser blueprint <file>`` adds the ``<parent>``.
"""

import json
import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from mod_audit.core.config import DEBUG, get_asset_timeout
from mod_audit.parser_resolver import resolve_parser_path

from .tables import AssetParseError, PackageTables, main_export, tables_from_inspect

logger = logging.getLogger("mod-audit")

# Root export classes whose parent comes from the ``blueprint`` command
_BLUEPRINT_CLASS_SUFFIX = "GeneratedClass"


class AssetParserExtractor:
    """Callable ``(primary_bytes, export_bytes, name) -> PackageTables``."""

    def __init__(self, parser_path: str | Path = None, timeout: Optional[int] = None):
        """
        Args:
            parser_path: Path to AssetParser (auto-detected if not provided)
            timeout: Per-command timeout in seconds (MOD_AUDIT_ASSET_TIMEOUT if not provided)
        """
        resolved = parser_path or resolve_parser_path()
        self.parser_path = Path(resolved) if resolved else None
        self.timeout = timeout or get_asset_timeout()

    def _parser_cmd(self, command: str, file_path: str) -> list[str]:
        return [str(self.parser_path), command, file_path]

    def _run_parser(self, command: str, file_path: str) -> str:
        if not self.parser_path or not self.parser_path.exists():
            raise AssetParseError(
                "AssetParser not found. Build it or set MOD_AUDIT_ASSET_PARSER."
            )

        cmd = self._parser_cmd(command, file_path)
        if DEBUG:
            logger.debug("running: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise AssetParseError("AssetParser timed out") from e
        except OSError as e:
            raise AssetParseError(f"Failed to run AssetParser: {e}") from e

        if result.returncode != 0:
            logger.debug("AssetParser stderr: %s", (result.stderr or "")[:500])
            raise AssetParseError("failed to parse asset")
        return result.stdout

    def _blueprint_parent(self, file_path: str) -> Optional[str]:
        """``<parent>`` of the blueprint XML, or None when it cannot be read."""
        try:
            root = ET.fromstring(self._run_parser("blueprint", file_path))
        except (AssetParseError, ET.ParseError) as e:
            logger.warning("%s: blueprint parent not readable: %s", file_path, e)
            return None
        return root.findtext("parent", "").strip() or None

    def __call__(
        self,
        primary: bytes,
        export: bytes,
        name: str = "asset",
        primary_extension: str = "uasset",
    ) -> PackageTables:
        with tempfile.TemporaryDirectory(prefix="mod-audit-asset-") as tmp:
            base = os.path.join(tmp, os.path.basename(name) or "asset")
            primary_path = f"{base}.{primary_extension}"
            with open(primary_path, "wb") as f:
                f.write(primary)
            with open(f"{base}.uexp", "wb") as f:
                f.write(export)

            output = self._run_parser("inspect", primary_path)
            try:
                data = json.loads(output)
            except json.JSONDecodeError as e:
                raise AssetParseError("failed to parse asset") from e

            parent = None
            root = main_export(data) if isinstance(data, dict) else None
            if root and str(root.get("class", "")).endswith(_BLUEPRINT_CLASS_SUFFIX):
                parent = self._blueprint_parent(primary_path)

        return tables_from_inspect(data, parent)
