"""MCP Server for Unreal mod auditing.

Two tools:
  - audit_container: Lint one pak/zip/URL and classify its assets
  - find_conflicts: Game paths modified by more than one installed mod.io mod

Usage:
    # Run directly (stdio transport)
    python -m mod_audit.mcp_server

    # Add to an MCP client config:
    {
        "mcpServers": {
            "mod-audit": {
                "command": "mod-audit-mcp"
            }
        }
    }
"""

import json
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger("mod-audit")

# Support source-based invocation:
#   python /path/to/repo/mod_audit/mcp_server.py
if __package__ in (None, ""):
    repo_root = Path(__file__).resolve().parent.parent
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from mod_audit.assets import AssetParserExtractor
from mod_audit.audit import audit_reference
from mod_audit.audit_profile import load_profile
from mod_audit.container import ContainerError
from mod_audit.core.config import get_setting
from mod_audit.modio import collect_listings, get_modio_dir
from mod_audit.ownership import build_ownership_index
from mod_audit.pathutil import InvalidMountPointError

_DEFAULT_PROFILE = "drg"

# Create the MCP server
server = Server("mod-audit")


# =============================================================================
# Tool implementations
# =============================================================================


def audit_container(reference: str, profile: str | None = None) -> dict:
    """Audit one container and return the report as a dict."""
    if not reference:
        return {"error": "reference is required"}

    try:
        audit_profile = load_profile(profile or get_setting("profile") or _DEFAULT_PROFILE)
    except FileNotFoundError as e:
        return {"error": str(e)}

    extractor = AssetParserExtractor()
    try:
        report = audit_reference(reference, audit_profile, extractor)
    except (InvalidMountPointError, ContainerError) as e:
        return {"container": reference, "error": str(e)}
    return report.to_dict()


def find_conflicts(
    modio_dir: str | None = None,
    game_id: str | None = None,
    contested_only: bool = True,
) -> dict:
    """Build the cross-mod ownership index for a mod.io install."""
    try:
        audit_profile = load_profile(get_setting("profile") or _DEFAULT_PROFILE)
        directory = Path(
            modio_dir
            or get_setting("modio_dir")
            or get_modio_dir(audit_profile.modio.get("steam_app_id"))
        )
    except (FileNotFoundError, ValueError) as e:
        return {"error": str(e)}

    game_id = game_id or get_setting("game_id") or audit_profile.modio.get("game_id")
    if not game_id:
        return {"error": "No mod.io game id configured"}

    try:
        listings = collect_listings(directory, str(game_id))
    except (FileNotFoundError, ValueError) as e:
        return {"error": str(e)}

    index = build_ownership_index(listings)
    return {
        "modio_dir": str(directory),
        "mods_indexed": len(listings),
        "paths": index.to_dict(contested_only=contested_only),
    }


# =============================================================================
# MCP Tool Definitions
# =============================================================================


@server.list_tools()
async def list_tools() -> list[Tool]:
    """Return available tools."""
    return [
        Tool(
            name="audit_container",
            description="""Lint a packaged Unreal mod (.pak, .zip wrapping a .pak, or http(s) URL).

Returns:
  - extraneous_files: members with a missing or disallowed extension
  - split_pairs: .uasset/.umap without .uexp or the reverse
  - hierarchy: blueprint inheritance between assets of the same pak
  - verification: per-asset class and auto-verify tier (yes / no / ?)""",
            inputSchema={
                "type": "object",
                "properties": {
                    "reference": {
                        "type": "string",
                        "description": "Local path or URL of the mod container",
                    },
                    "profile": {
                        "type": "string",
                        "description": "Audit profile name (default: drg)",
                    },
                },
                "required": ["reference"],
            },
        ),
        Tool(
            name="find_conflicts",
            description="""List game paths modified by more than one installed mod.io mod.

Reads the mod.io state.json for display names and each mod's .pak listing.""",
            inputSchema={
                "type": "object",
                "properties": {
                    "modio_dir": {
                        "type": "string",
                        "description": "mod.io directory (default: auto-detect)",
                    },
                    "game_id": {
                        "type": "string",
                        "description": "mod.io game id (default: from profile)",
                    },
                    "contested_only": {
                        "type": "boolean",
                        "description": "Only paths with more than one owner",
                        "default": True,
                    },
                },
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "audit_container":
            result = audit_container(
                reference=arguments.get("reference", ""),
                profile=arguments.get("profile"),
            )
        elif name == "find_conflicts":
            result = find_conflicts(
                modio_dir=arguments.get("modio_dir"),
                game_id=arguments.get("game_id"),
                contested_only=arguments.get("contested_only", True),
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [
            TextContent(type="text", text=json.dumps(result, indent=2, default=str))
        ]

    except Exception as e:
        logger.exception("tool %s failed", name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


# =============================================================================
# Main
# =============================================================================


async def main():
    """Run the MCP server."""
    if os.environ.get("MOD_AUDIT_DEBUG"):
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s %(levelname)s: %(message)s",
            stream=sys.stderr,
        )
    else:
        logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    print("Mod Audit MCP Server", file=sys.stderr)
    print("Tools: audit_container, find_conflicts", file=sys.stderr)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )


def cli_main():
    """Entry point for the mod-audit-mcp command."""
    import asyncio

    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
