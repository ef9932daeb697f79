"""
Provider colours for calendar and dashboard views.

Colours are a pure function of the provider id (or an explicit index), so
the same provider gets the same colour in every view and process.
"""

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderColor:
    background: str
    border: str


DEFAULT_PALETTE = (
    ProviderColor("#3B82F6", "#2563EB"),  # blue
    ProviderColor("#10B981", "#059669"),  # green
    ProviderColor("#F59E0B", "#D97706"),  # amber
    ProviderColor("#EF4444", "#DC2626"),  # red
    ProviderColor("#8B5CF6", "#7C3AED"),  # violet
    ProviderColor("#EC4899", "#DB2777"),  # pink
    ProviderColor("#6366F1", "#4F46E5"),  # indigo
    ProviderColor("#14B8A6", "#0D9488"),  # teal
)


def stable_index(provider_id: str) -> int:
    """Process-independent integer derived from the provider id."""
    digest = hashlib.sha256(provider_id.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def color_for(
    provider_id: str,
    palette: tuple[ProviderColor, ...] = DEFAULT_PALETTE,
    index: int | None = None,
) -> ProviderColor:
    if not palette:
        raise ValueError("palette must contain at least one colour")
    if index is None:
        index = stable_index(provider_id)
    return palette[index % len(palette)]


def assign_colors(
    provider_ids: Iterable[str],
    palette: tuple[ProviderColor, ...] = DEFAULT_PALETTE,
) -> dict[str, ProviderColor]:
    """Assign palette colours by sorted provider id, cycling when exhausted."""
    ordered = sorted(set(provider_ids))
    return {pid: color_for(pid, palette, index) for index, pid in enumerate(ordered)}
