"""
Triangle symbol mapping.

Translates between the closed SymbolID enumeration used internally
and the symbol strings the quote feed sends on the wire.
"""

from triarb.config.constants import (
    DEFAULT_ASSET_A,
    DEFAULT_ASSET_B,
    DEFAULT_ASSET_C,
    DEFAULT_SYMBOL_SEPARATOR,
)
from triarb.config.settings import Settings
from triarb.core.types import Asset, SymbolID


class TriangleSymbols:
    """
    Maps the configured asset names onto the triangle.

    With the defaults (FIL, ETH, BSV) the wire symbols are
    FIL-ETH (A/B), ETH-BSV (B/C) and FIL-BSV (A/C).
    """

    __slots__ = ("_assets", "_by_id", "_by_name")

    def __init__(
        self,
        asset_a: str = DEFAULT_ASSET_A,
        asset_b: str = DEFAULT_ASSET_B,
        asset_c: str = DEFAULT_ASSET_C,
        separator: str = DEFAULT_SYMBOL_SEPARATOR,
    ) -> None:
        """
        Build the symbol tables.

        Args:
            asset_a: Base asset name.
            asset_b: Intermediate asset name.
            asset_c: Quote-settlement asset name.
            separator: Separator between base and quote in wire symbols.

        Raises:
            ValueError: If asset names are not distinct.
        """
        if len({asset_a, asset_b, asset_c}) != 3:
            raise ValueError(f"Assets must be distinct: {asset_a}, {asset_b}, {asset_c}")

        self._assets: dict[Asset, str] = {Asset.A: asset_a, Asset.B: asset_b, Asset.C: asset_c}
        self._by_id: dict[SymbolID, str] = {
            sid: f"{self._assets[sid.base]}{separator}{self._assets[sid.quote]}"
            for sid in SymbolID
        }
        self._by_name: dict[str, SymbolID] = {name: sid for sid, name in self._by_id.items()}

    @classmethod
    def from_settings(cls, settings: Settings) -> "TriangleSymbols":
        """Create from application settings."""
        return cls(
            asset_a=settings.asset_a,
            asset_b=settings.asset_b,
            asset_c=settings.asset_c,
            separator=settings.symbol_separator,
        )

    def resolve(self, name: str) -> SymbolID | None:
        """
        Look up a wire symbol.

        Returns:
            SymbolID, or None if the symbol is not part of the triangle.
        """
        return self._by_name.get(name)

    def wire_name(self, symbol: SymbolID) -> str:
        """Get the wire symbol for a SymbolID."""
        return self._by_id[symbol]

    def asset_name(self, asset: Asset) -> str:
        """Get the configured name of an asset."""
        return self._assets[asset]

    @property
    def wire_names(self) -> frozenset[str]:
        """All three wire symbols."""
        return frozenset(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        names = ", ".join(f"{sid.value}={name}" for sid, name in self._by_id.items())
        return f"TriangleSymbols({names})"
