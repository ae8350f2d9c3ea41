"""The fixed catalog of tracked metals."""

from __future__ import annotations

from dataclasses import dataclass

from metal_tracker.core.exceptions import UnknownMetalError
from metal_tracker.core.models import MetalData, MetalId, MetalSymbol


@dataclass(frozen=True)
class MetalInfo:
    """Static display attributes of a tracked metal."""

    id: MetalId
    name: str
    symbol: MetalSymbol
    icon: str
    color: str


# Display order; never reordered at runtime.
METALS: tuple[MetalInfo, ...] = (
    MetalInfo("gold", "Gold", MetalSymbol.GOLD, "🥇", "#F7931A"),
    MetalInfo("silver", "Silver", MetalSymbol.SILVER, "🥈", "#8E9AAF"),
    MetalInfo("platinum", "Platinum", MetalSymbol.PLATINUM, "⚪", "#E8E8E8"),
    MetalInfo("palladium", "Palladium", MetalSymbol.PALLADIUM, "⚫", "#B8BCC8"),
)

_BY_ID: dict[MetalId, MetalInfo] = {m.id: m for m in METALS}
_BY_SYMBOL: dict[MetalSymbol, MetalInfo] = {m.symbol: m for m in METALS}


def metal_by_id(metal_id: MetalId) -> MetalInfo | None:
    return _BY_ID.get(metal_id)


def metal_by_symbol(symbol: MetalSymbol) -> MetalInfo | None:
    return _BY_SYMBOL.get(symbol)


def require_metal(metal_id: MetalId) -> MetalInfo:
    """Like metal_by_id(), but raise UnknownMetalError for unknown ids."""
    info = _BY_ID.get(metal_id)
    if info is None:
        raise UnknownMetalError(
            f"Unknown metal: {metal_id!r}. Expected one of: {', '.join(_BY_ID)}",
            context={"metal_id": metal_id},
        )
    return info


def default_metals() -> tuple[MetalData, ...]:
    """Initial tracked items: loading, no quote, no history."""
    return tuple(
        MetalData(
            id=m.id,
            name=m.name,
            symbol=m.symbol,
            icon=m.icon,
            loading=True,
        )
        for m in METALS
    )
