"""
Build variants of libsodium.js (standard vs. sumo).

The sumo build exports everything in the catalog. The standard build
drops a fixed set of names; the filter applies to constants and functions
only, never to aliases, enums or records.
"""

from enum import Enum
from typing import AbstractSet, List, Sequence, TypeVar, Union

from .model import Constant, Symbol


_Entry = TypeVar("_Entry", Symbol, Constant)


class Variant(Enum):
    """Declaration document flavors."""
    STANDARD = "standard"
    SUMO = "sumo"

    @property
    def suffix(self) -> str:
        return "-sumo" if self is Variant.SUMO else ""

    def module_name(self, base: str) -> str:
        return f"{base}{self.suffix}"

    def file_name(self, base: str) -> str:
        return f"{base}{self.suffix}.d.ts"

    @classmethod
    def from_flag(cls, sumo: Union[bool, "Variant", None]) -> "Variant":
        if isinstance(sumo, Variant):
            return sumo
        return cls.SUMO if sumo else cls.STANDARD


def select_for_variant(
    entries: Sequence[_Entry],
    excluded: AbstractSet[str],
    variant: Variant,
) -> List[_Entry]:
    """
    Filter entries for a variant.

    Args:
        entries: Symbols or constants, already sorted
        excluded: Lower-cased sumo-only names
        variant: Requested variant

    Returns:
        New list; order is preserved
    """
    if variant is Variant.SUMO:
        return list(entries)
    return [entry for entry in entries if entry.name.lower() not in excluded]


__all__ = ["Variant", "select_for_variant"]
