"""Pak container access through the ``repak`` command-line tool.

The audit core only needs three things from a container, so any object with
this shape can stand in for a pak (tests use an in-memory one):

    container.mount_point -> str
    container.files()     -> list[str]   member paths relative to the mount point
    container.read(path)  -> bytes       raw member contents
"""

import logging
import os
import shutil
import subprocess
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from mod_audit.core.config import DEBUG, get_asset_timeout
from mod_audit.parser_resolver import resolve_repak_path

logger = logging.getLogger("mod-audit")

_LIST_TIMEOUT = 120  # seconds, listing large paks is slower than single reads


class ContainerError(OSError):
    """The container could not be opened, enumerated or read."""


class RepakContainer:
    """A ``.pak`` file read by shelling out to ``repak``."""

    def __init__(self, pak_path: str | Path, repak_path: Optional[str] = None):
        self.pak_path = Path(pak_path)
        self.repak_path = repak_path or resolve_repak_path()
        self._mount_point: Optional[str] = None
        self._files: Optional[list[str]] = None

        if not self.pak_path.is_file():
            raise ContainerError(f"Container not found: {self.pak_path}")
        if not self.repak_path:
            raise ContainerError(
                "repak not found. Install it (cargo install --git "
                "https://github.com/trumank/repak repak_cli) or set MOD_AUDIT_REPAK."
            )

    def _run(self, args: list[str], timeout: int) -> bytes:
        cmd = [str(self.repak_path), *args]
        if DEBUG:
            logger.debug("running: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise ContainerError(f"repak timed out: {' '.join(args)}") from e
        except OSError as e:
            raise ContainerError(f"Failed to run repak: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ContainerError(
                f"repak {args[0]} failed for {self.pak_path}: {stderr[:500]}"
            )
        return result.stdout

    @property
    def mount_point(self) -> str:
        if self._mount_point is None:
            output = self._run(["info", str(self.pak_path)], _LIST_TIMEOUT)
            for line in output.decode("utf-8", errors="replace").splitlines():
                key, sep, value = line.partition(":")
                if sep and key.strip().lower() == "mount point":
                    self._mount_point = value.strip()
                    break
            else:
                raise ContainerError(f"No mount point reported for {self.pak_path}")
        return self._mount_point

    def files(self) -> list[str]:
        if self._files is None:
            output = self._run(["list", str(self.pak_path)], _LIST_TIMEOUT)
            self._files = [
                line.strip()
                for line in output.decode("utf-8", errors="replace").splitlines()
                if line.strip()
            ]
        return list(self._files)

    def read(self, path: str) -> bytes:
        return self._run(["get", str(self.pak_path), path], get_asset_timeout())


def _extract_pak_from_zip(zip_path: Path, dest_dir: Path) -> Path:
    """Copy the first ``.pak`` member of a zip into dest_dir."""
    try:
        with zipfile.ZipFile(zip_path) as zf:
            for info in zf.infolist():
                if info.is_dir() or not info.filename.lower().endswith(".pak"):
                    continue
                target = dest_dir / Path(info.filename).name
                with zf.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                return target
    except zipfile.BadZipFile as e:
        raise ContainerError(f"Corrupt zip archive {zip_path}: {e}") from e
    raise ContainerError(f"No .pak found in zip: {zip_path}")


@contextmanager
def open_container(
    path: str | Path, repak_path: Optional[str] = None
) -> Iterator[RepakContainer]:
    """Open a ``.pak`` (or a mod ``.zip`` wrapping one) for auditing.

    Zip downloads are unpacked into a temporary directory that lives for the
    duration of the ``with`` block.
    """
    path = Path(path)
    if not path.is_file():
        raise ContainerError(f"Container not found: {path}")

    if not zipfile.is_zipfile(path):
        yield RepakContainer(path, repak_path)
        return

    with tempfile.TemporaryDirectory(prefix="mod-audit-") as tmp:
        pak = _extract_pak_from_zip(path, Path(tmp))
        logger.debug("extracted %s from %s", pak.name, path)
        yield RepakContainer(pak, repak_path)


def find_pak(directory: str | Path) -> Optional[Path]:
    """Return the first ``.pak`` found under directory (depth-first, sorted)."""
    directory = Path(directory)
    for entry in sorted(os.scandir(directory), key=lambda e: e.name):
        if entry.is_dir():
            found = find_pak(entry.path)
            if found:
                return found
        elif entry.name.lower().endswith(".pak"):
            return Path(entry.path)
    return None
