"""Host collection access: narrow interfaces, candidate selection and a JSON catalog."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from cull.errors import CatalogError, RecordNotFoundError
from cull.models import Asset

logger = logging.getLogger(__name__)


class AssetSource(Protocol):
    def assets(self) -> Sequence[Asset | None] | None: ...


class RecordStore(Protocol):
    def delete(self, asset: Asset) -> None: ...


def select_rejected(collection: Sequence[Asset | None] | None) -> list[Asset]:
    if not collection:
        logger.warning("No images in the current collection.")
        return []
    return [item for item in collection if isinstance(item, Asset) and item.rejected]


def collection_info(collection: Sequence[Asset | None] | None) -> str:
    if collection is None:
        return "No collection"
    rejected = sum(1 for item in collection if isinstance(item, Asset) and item.rejected)
    return f"{len(collection)} images ({rejected} rejected)"


class JsonCatalog:
    """A collection stored as ``{"assets": [{"directory", "filename", "rating"}]}``.

    Serves as both the asset source and the record store of the CLI.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def assets(self) -> list[Asset | None]:
        return [_asset_from_entry(entry) for entry in self._load()]

    def delete(self, asset: Asset) -> None:
        entries = self._load()
        remaining = [entry for entry in entries if _asset_from_entry(entry) != asset]
        if len(remaining) == len(entries):
            raise RecordNotFoundError(f"No catalog record for {asset.path}")
        self._save(remaining)

    def _load(self) -> list[Any]:
        if not self.path.exists():
            logger.warning("Catalog not found: %s", self.path)
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CatalogError(f"Cannot read catalog {self.path}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("assets"), list):
            raise CatalogError(f"Catalog {self.path} has no 'assets' list")
        return data["assets"]

    def _save(self, entries: list[Any]) -> None:
        payload = json.dumps({"assets": entries}, indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".catalog_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _asset_from_entry(entry: Any) -> Asset | None:
    if not isinstance(entry, dict):
        logger.debug("Skipping malformed catalog entry: %r", entry)
        return None
    directory = entry.get("directory")
    filename = entry.get("filename")
    rating = entry.get("rating", 0)
    if not isinstance(directory, str) or not isinstance(filename, str):
        logger.debug("Skipping catalog entry without directory/filename: %r", entry)
        return None
    if not isinstance(rating, int) or isinstance(rating, bool):
        logger.debug("Skipping catalog entry with invalid rating: %r", entry)
        return None
    return Asset(directory=directory, filename=filename, rating=rating)
