"""Asset Store - ordered registry of assets plus the current selection."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .models import Asset

logger = logging.getLogger(__name__)


class AssetStoreError(Exception):
    """Base class for asset store errors."""


class DuplicateAssetError(AssetStoreError):
    """Raised when an append would introduce an id that is already present."""


class InvalidSelectionError(AssetStoreError):
    """Raised when selecting an asset that is not in the store."""


class AssetStore:
    """Ordered, append-only collection of assets with a zero-or-one selection.

    ``append`` validates a whole batch before touching anything and then swaps
    in a new tuple, so a reader never sees half a batch. Existing entries are
    never replaced or removed.

    Selection is checked by membership: the asset passed to ``select`` must
    match the stored record with the same ``id``.
    """

    def __init__(self, assets: Optional[Iterable[Asset]] = None) -> None:
        self._assets: Tuple[Asset, ...] = ()
        self._index: Dict[str, Asset] = {}
        self._selected: Optional[Asset] = None
        if assets:
            self.append(assets)

    def append(self, assets: Iterable[Asset]) -> Tuple[Asset, ...]:
        """Append a batch of assets, preserving order.

        Returns:
            The appended assets

        Raises:
            DuplicateAssetError: If any id already exists or repeats in the batch
        """
        batch = tuple(assets)
        if not batch:
            return batch

        seen = set()
        for asset in batch:
            if asset.id in self._index or asset.id in seen:
                raise DuplicateAssetError(f"Asset id already present: {asset.id}")
            seen.add(asset.id)

        index = dict(self._index)
        index.update((asset.id, asset) for asset in batch)
        self._assets = self._assets + batch
        self._index = index

        logger.debug(f"AssetStore: appended {len(batch)} asset(s), total {len(self._assets)}")
        return batch

    def select(self, asset: Optional[Asset]) -> None:
        """Set or clear the selection.

        Raises:
            InvalidSelectionError: If ``asset`` is not present in the store
        """
        if asset is None:
            self._selected = None
            return

        stored = self._index.get(asset.id)
        if stored is None or stored != asset:
            raise InvalidSelectionError(f"Asset is not in the store: {asset.id}")
        self._selected = stored

    def current(self) -> Tuple[Asset, ...]:
        return self._assets

    def selected(self) -> Optional[Asset]:
        return self._selected

    def get(self, asset_id: str) -> Optional[Asset]:
        return self._index.get(asset_id)

    def ids(self) -> Tuple[str, ...]:
        return tuple(asset.id for asset in self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Asset):
            return self._index.get(item.id) == item
        if isinstance(item, str):
            return item in self._index
        return False
