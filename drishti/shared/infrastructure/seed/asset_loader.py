"""Bootstrap asset loading from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import TypeAdapter, ValidationError

from drishti.shared.domain.assets.models import Asset

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "data" / "assets.yaml"

_ASSET_LIST = TypeAdapter(List[Asset])


class SeedDataError(Exception):
    """The bootstrap file is missing, unreadable or does not match the Asset schema."""


def load_seed_assets(path: Optional[Union[str, Path]] = None) -> List[Asset]:
    """Load the initial asset set.

    The file holds either a list of asset records or a mapping with an
    ``assets`` list. Ids must be unique.

    Raises:
        SeedDataError: On I/O, YAML or validation problems
    """
    seed_path = Path(path) if path else DEFAULT_SEED_PATH
    try:
        with open(seed_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise SeedDataError(f"Cannot read seed file {seed_path}: {e}") from e
    except yaml.YAMLError as e:
        raise SeedDataError(f"Invalid YAML in {seed_path}: {e}") from e

    if raw is None:
        return []
    if isinstance(raw, dict):
        raw = raw.get("assets", [])

    try:
        assets = _ASSET_LIST.validate_python(raw)
    except ValidationError as e:
        raise SeedDataError(f"Seed file {seed_path} does not match the asset schema:\n{e}") from e

    seen = set()
    for asset in assets:
        if asset.id in seen:
            raise SeedDataError(f"Duplicate asset id in {seed_path}: {asset.id}")
        seen.add(asset.id)

    logger.info(f"Loaded {len(assets)} seed asset(s) from {seed_path}")
    return assets
