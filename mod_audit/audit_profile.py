"""Audit profiles: the allow-lists and game-specific settings used by a run.

Profiles are JSON files under ``profiles/``. ``_defaults.json`` carries the
engine-level lists; a game overlay (e.g. ``drg.json``) adds exemptions and
mod.io identifiers on top of it.

Usage:
    from mod_audit.audit_profile import load_profile
    profile = load_profile("drg")        # explicit name
    profile = load_profile(None)         # resolve from config / environment
"""

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


_PROFILES_DIR = Path(__file__).parent / "profiles"


@dataclass(frozen=True)
class AuditProfile:
    """Immutable allow-lists consumed by the pairing analyzer and the classifier."""

    profile_name: str = ""

    # Extensions a packaged mod may legitimately contain
    valid_extensions: frozenset[str] = field(default_factory=frozenset)

    # Mount-relative paths never reported as extraneous
    exempt_paths: frozenset[str] = field(default_factory=frozenset)

    # Root export classes that can be approved without a human
    auto_verified_classes: frozenset[str] = field(default_factory=frozenset)

    # mod.io identifiers: game_id, steam_app_id
    modio: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "profile_name": self.profile_name,
            "valid_extensions": sorted(self.valid_extensions),
            "exempt_paths": sorted(self.exempt_paths),
            "auto_verified_classes": sorted(self.auto_verified_classes),
            "modio": dict(self.modio),
        }


# Module-level cache: profile_name -> AuditProfile
_cache: dict[str, AuditProfile] = {}


def _resolve_profile_name() -> Optional[str]:
    """Resolve the profile name from the environment or config.json."""
    from mod_audit.core.config import get_setting

    return get_setting("profile") or None


def _load_json_profile(name: str) -> dict:
    """Load a profile JSON file by name. Raises FileNotFoundError if missing."""
    path = _PROFILES_DIR / f"{name}.json"
    if not path.exists():
        raise FileNotFoundError(
            f"Profile '{name}' not found at {path}. "
            f"Available profiles: {', '.join(list_profiles())}"
        )
    with open(path, "r") as f:
        return json.load(f)


def list_profiles() -> list[str]:
    return sorted(p.stem for p in _PROFILES_DIR.glob("*.json"))


def _merge_profiles(defaults: dict, overlay: dict) -> dict:
    """Merge overlay on top of defaults.

    Lists concatenate and dedupe (order preserved), dicts merge recursively,
    anything else is replaced by the overlay value.
    """
    merged = dict(defaults)
    for key, value in overlay.items():
        base = merged.get(key)
        if isinstance(base, list) and isinstance(value, list):
            merged[key] = list(dict.fromkeys(base + value))
        elif isinstance(base, dict) and isinstance(value, dict):
            merged[key] = _merge_profiles(base, value)
        else:
            merged[key] = value
    return merged


def load_profile(
    profile_name: Optional[str] = None, emit_info: bool = True
) -> AuditProfile:
    """Load and merge an audit profile.

    Args:
        profile_name: Explicit profile name (e.g., "drg"). If None, resolves
                      from MOD_AUDIT_PROFILE or config.json.
        emit_info: If True, print an informational message when no profile
                   is configured and engine defaults are used.

    Returns:
        AuditProfile with defaults merged with the named profile.
    """
    if profile_name is None:
        profile_name = _resolve_profile_name()

    cache_key = profile_name or "__defaults_only__"

    if cache_key in _cache:
        return _cache[cache_key]

    defaults = _load_json_profile("_defaults")

    if profile_name and profile_name != "_defaults":
        overlay = _load_json_profile(profile_name)
        merged = _merge_profiles(defaults, overlay)
    else:
        if profile_name is None and emit_info:
            print(
                "INFO: Using engine defaults. "
                "Pass --profile or set MOD_AUDIT_PROFILE to enable game-specific exemptions.",
                file=sys.stderr,
            )
        merged = defaults

    profile = AuditProfile(
        profile_name=merged.get("profile_name", cache_key),
        valid_extensions=frozenset(
            e.lower().lstrip(".") for e in merged.get("valid_extensions", [])
        ),
        exempt_paths=frozenset(merged.get("exempt_paths", [])),
        auto_verified_classes=frozenset(merged.get("auto_verified_classes", [])),
        modio=dict(merged.get("modio", {})),
    )

    _cache[cache_key] = profile
    return profile


def clear_cache() -> None:
    """Clear the profile cache (useful for tests)."""
    _cache.clear()
