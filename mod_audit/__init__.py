# UE Mod Audit
# Packaging lint, blueprint hierarchy and auto-verify classification for Unreal mods

__version__ = "0.1.0"
