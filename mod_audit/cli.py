#!/usr/bin/env python3
"""
UE Mod Audit - command line entry points

Usage:
    mod-lint <mod.pak | mod.zip | https://...>     Lint one mod and classify its assets
    mod-lint <container> --json                    Same, as JSON
    mod-lint <container> --profile _defaults       Use engine defaults only

    modio-audit                                    Find assets touched by several installed mods
    modio-audit <mod.io dir> --contested-only      Only list paths with more than one owner
"""

import argparse
import json
import logging
import os
import sys
from functools import partial
from pathlib import Path

from mod_audit.core.config import DEBUG, get_setting

logger = logging.getLogger("mod-audit")

_DEFAULT_PROFILE = "drg"


def configure_logging() -> None:
    """Route the mod-audit logger to stderr; DEBUG when MOD_AUDIT_DEBUG is set."""
    if DEBUG or os.environ.get("MOD_AUDIT_DEBUG"):
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s %(levelname)s: %(message)s",
            stream=sys.stderr,
        )
    else:
        logging.basicConfig(level=logging.WARNING, stream=sys.stderr)


def _load_profile_or_exit(name):
    from mod_audit.audit_profile import load_profile

    try:
        return load_profile(name or get_setting("profile") or _DEFAULT_PROFILE)
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_lint(args):
    """Audit a single container and print the report."""
    from mod_audit.assets import AssetParserExtractor
    from mod_audit.audit import audit_reference, format_report
    from mod_audit.container import ContainerError
    from mod_audit.pathutil import InvalidMountPointError

    profile = _load_profile_or_exit(args.profile)
    extractor = AssetParserExtractor(parser_path=args.parser)

    try:
        report = audit_reference(args.container, profile, extractor, repak_path=args.repak)
    except (InvalidMountPointError, ContainerError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return

    for line in format_report(report):
        print(line)


def _resolve_modio_dir(args, profile) -> Path:
    from mod_audit.modio import get_modio_dir

    try:
        if args.modio_dir:
            path = Path(args.modio_dir)
        elif get_setting("modio_dir"):
            path = Path(get_setting("modio_dir"))
        else:
            path = get_modio_dir(profile.modio.get("steam_app_id"))
        if not path.is_dir():
            raise ValueError(f"{path} is not a directory")
    except ValueError as e:
        print(
            f"ERROR: Could not find mod.io directory ({e}). "
            "Try manually specifying it as an argument if you haven't already.",
            file=sys.stderr,
        )
        sys.exit(1)
    return path


def cmd_modio(args):
    """Index every installed mod and print the paths they share."""
    from mod_audit.container import open_container
    from mod_audit.modio import collect_listings
    from mod_audit.ownership import build_ownership_index, format_ownership_report

    profile = _load_profile_or_exit(args.profile)
    modio_dir = _resolve_modio_dir(args, profile)

    game_id = args.game_id or get_setting("game_id") or profile.modio.get("game_id")
    if not game_id:
        print("ERROR: No mod.io game id. Pass --game-id.", file=sys.stderr)
        sys.exit(1)

    try:
        listings = collect_listings(
            modio_dir, str(game_id), opener=partial(open_container, repak_path=args.repak)
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    index = build_ownership_index(listings)
    if args.json:
        print(json.dumps(index.to_dict(contested_only=args.contested_only), indent=2))
        return

    for line in format_ownership_report(index, contested_only=args.contested_only):
        print(line)


def _add_common_args(parser):
    parser.add_argument("--profile", help="Audit profile (default: drg)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--repak", help="Path to the repak binary")


def main(argv=None):
    """Entry point for the mod-lint command."""
    parser = argparse.ArgumentParser(
        prog="mod-lint",
        description="Lint a packaged Unreal mod and classify its assets for auto-verification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mod-lint MyMod.pak
  mod-lint MyMod.zip --json
  mod-lint https://example.com/MyMod.zip
""",
    )
    parser.add_argument("container", nargs="?", help="Path or URL of a .pak or .zip")
    _add_common_args(parser)
    parser.add_argument("--parser", help="Path to the AssetParser binary")

    args = parser.parse_args(argv)
    if not args.container:
        print("Usage: mod-lint <mod .pak or .zip>")
        return

    configure_logging()
    cmd_lint(args)


def modio_main(argv=None):
    """Entry point for the modio-audit command."""
    parser = argparse.ArgumentParser(
        prog="modio-audit",
        description="Find game paths modified by more than one installed mod.io mod",
    )
    parser.add_argument("modio_dir", nargs="?", help="mod.io directory (default: auto-detect)")
    parser.add_argument("--game-id", help="mod.io game id (default: from profile)")
    parser.add_argument(
        "--contested-only",
        action="store_true",
        help="Only list paths owned by more than one mod",
    )
    _add_common_args(parser)

    args = parser.parse_args(argv)
    configure_logging()
    cmd_modio(args)


if __name__ == "__main__":
    main()
