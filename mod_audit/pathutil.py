"""Path utilities for mapping pak member paths onto Unreal game paths.

A pak declares a mount point (almost always ``../../../``) and stores its
members relative to it. Stripping that prefix leaves a path relative to the
engine install, e.g. ``FSD/Content/Weapons/BP_Rifle.uasset``. The game itself
addresses the same asset as ``/Game/Weapons/BP_Rifle``.
"""

import posixpath

MOUNT_PREFIX = "../../../"


class InvalidMountPointError(ValueError):
    """The pak mount point does not start with ``../../../``."""


class PathNormalizationError(ValueError):
    """A mount-relative path matches none of the known root conventions."""


def to_game_path_sep(path: str) -> str:
    """Normalize path separators to forward slashes for Unreal game paths."""
    return path.replace("\\", "/")


def strip_mount_point(mount_point: str) -> str:
    """Return the mount point with the mandatory ``../../../`` removed.

    Raises:
        InvalidMountPointError: if the prefix is missing.
    """
    mount = to_game_path_sep(mount_point)
    if mount == MOUNT_PREFIX.rstrip("/"):
        return ""
    if not mount.startswith(MOUNT_PREFIX):
        raise InvalidMountPointError(
            f'Invalid mount point: {mount_point}, should begin with "{MOUNT_PREFIX}"'
        )
    return mount[len(MOUNT_PREFIX) :]


def join_mount(sanitized_mount: str, member: str) -> str:
    """Join a member path onto an already-stripped mount point."""
    member = to_game_path_sep(member).lstrip("/")
    if not sanitized_mount:
        return member
    return posixpath.join(sanitized_mount, member)


def split_extension(path: str) -> tuple[str, str | None]:
    """Split ``Foo/Bar.uasset`` into ``("Foo/Bar", "uasset")``.

    Only the final component is inspected, so dots in directory names are
    left alone. Dotfiles (``.gitignore``) count as having no extension.
    """
    path = to_game_path_sep(path)
    head, tail = posixpath.split(path)
    stem, dot, ext = tail.rpartition(".")
    if not dot or not stem:
        return path, None
    return posixpath.join(head, stem) if head else stem, ext


def strip_extension(path: str) -> str:
    return split_extension(path)[0]


def normalize_game_path(relative_path: str) -> str:
    """Map a mount-relative path to its canonical game path.

    Conventions, checked in order:
      Engine/Content/...                   -> /Engine/...
      Engine/Plugins/.../<Name>/Content/... -> /<Name>/...
      <Project>/Content/...                -> /Game/...

    Component names match case-insensitively; the remainder keeps its casing.

    Raises:
        PathNormalizationError: if no convention matches.
    """
    parts = [p for p in to_game_path_sep(relative_path).split("/") if p]
    lowered = [p.lower() for p in parts]

    if len(parts) >= 2 and lowered[0] == "engine":
        if lowered[1] == "content":
            return "/" + "/".join(["Engine"] + parts[2:])
        if lowered[1] == "plugins":
            for i in range(2, len(parts)):
                if lowered[i] == "content":
                    if i == 2:
                        break
                    return "/" + "/".join([parts[i - 1]] + parts[i + 1 :])
            raise PathNormalizationError(
                f"No Content folder in plugin path: {relative_path}"
            )

    if len(parts) >= 2 and lowered[1] == "content":
        return "/" + "/".join(["Game"] + parts[2:])

    raise PathNormalizationError(f"Unrecognized content root: {relative_path}")
