"""Assets — протокол коллаборатора актива и реализация в памяти."""

from .ledger import AssetLedger, InMemoryAsset, resolve_asset

__all__ = [
    "AssetLedger",
    "InMemoryAsset",
    "resolve_asset",
]
