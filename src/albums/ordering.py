"""Name ordering shared by the catalog and album documents."""

from __future__ import annotations

import unicodedata
from typing import Protocol, TypeVar


class _Named(Protocol):
    name: str


NamedT = TypeVar("NamedT", bound=_Named)


def collation_key(name: str) -> tuple[str, str, str]:
    """Return a locale-style sort key for a display name.

    Names compare case- and accent-insensitively first, then by case
    folding, then by raw code points.

    Args:
        name: Display name.

    Returns:
        Sort key tuple.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), name.casefold(), name


def sort_by_name(items: list[NamedT]) -> None:
    """Sort records by name in place; equal names keep their order."""
    items.sort(key=lambda item: collation_key(item.name))
