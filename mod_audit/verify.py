"""Auto-verify classification of extracted asset classes.

Moderation can approve a pak without a human only when every asset is of a
class that cannot carry logic (textures, meshes, sounds, ...). The allow-list
comes from the active AuditProfile.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Mapping, Union


class Tier(IntEnum):
    PASS = 0
    FAIL = 1
    UNKNOWN = 2

    @property
    def glyph(self) -> str:
        return {Tier.PASS: "yes", Tier.FAIL: "no", Tier.UNKNOWN: "?"}[self]


@dataclass(frozen=True)
class VerificationRow:
    path: str
    class_or_error: str
    tier: Tier

    @property
    def is_error(self) -> bool:
        return self.tier is Tier.UNKNOWN

    def sort_key(self) -> tuple:
        return (self.tier, self.class_or_error, self.path)

    def to_dict(self) -> dict:
        key = "error" if self.is_error else "class"
        return {
            "path": self.path,
            key: self.class_or_error,
            "auto_verify": self.tier.glyph,
        }


# Extraction outcome per asset: the class name, or the exception that stopped it
ClassResult = Union[str, BaseException]


def classify(result: ClassResult, allowed_classes: frozenset[str]) -> Tier:
    if isinstance(result, BaseException):
        return Tier.UNKNOWN
    return Tier.PASS if result in allowed_classes else Tier.FAIL


def build_verification_rows(
    results: Mapping[str, ClassResult], allowed_classes: frozenset[str]
) -> list[VerificationRow]:
    """Classify every asset and sort by (tier, class or error text, path)."""
    rows = [
        VerificationRow(
            path=path,
            class_or_error=str(result),
            tier=classify(result, allowed_classes),
        )
        for path, result in results.items()
    ]
    rows.sort(key=VerificationRow.sort_key)
    return rows


def format_verification_table(rows: list[VerificationRow]) -> list[str]:
    lines = [f"{'auto-verify':12} {'class':30} asset path"]
    for row in rows:
        lines.append(f"{row.tier.glyph:^12} {row.class_or_error:30} {row.path}")
    return lines
