"""Catalog file loading."""

import json
import logging
from pathlib import Path

from ..models.dataset import HierarchicalDataset
from ..models.node import Node
from ..services.node_index import NodeIndex, flatten_dataset

logger = logging.getLogger(__name__)

# Default catalog bundled with the package
DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "catalog.json"

_catalog_path: Path = DEFAULT_CATALOG_PATH


class CatalogError(ValueError):
    """Raised when a catalog file cannot be read or decoded."""


def set_catalog_path(path: Path | str) -> None:
    """Set the catalog path."""
    global _catalog_path
    _catalog_path = Path(path)


def get_catalog_path() -> Path:
    """Get the current catalog path."""
    return _catalog_path


def load_raw_catalog(path: Path | str | None = None) -> dict:
    """Read a catalog JSON file into a mapping."""
    catalog_path = Path(path) if path else get_catalog_path()
    try:
        text = catalog_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read catalog '{catalog_path}': {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog '{catalog_path}' is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog '{catalog_path}' must contain a JSON object")
    return data


def load_catalog(path: Path | str | None = None) -> HierarchicalDataset:
    """Load and parse a catalog file."""
    dataset = HierarchicalDataset.from_raw(load_raw_catalog(path))
    logger.info("Loaded catalog with %d categories", len(dataset.categories))
    return dataset


class Catalog:
    """Lazily loaded, cached view of the configured catalog."""

    def __init__(self, path: Path | str | None = None):
        self._path = Path(path) if path else None
        self._dataset: HierarchicalDataset | None = None
        self._index: NodeIndex | None = None

    @property
    def path(self) -> Path:
        return self._path or get_catalog_path()

    @property
    def dataset(self) -> HierarchicalDataset:
        if self._dataset is None:
            self._dataset = load_catalog(self.path)
        return self._dataset

    @property
    def index(self) -> NodeIndex:
        if self._index is None:
            self._index = NodeIndex(flatten_dataset(self.dataset))
        return self._index

    @property
    def nodes(self) -> list[Node]:
        """Every node, subnodes included, in catalog order."""
        return self.index.nodes

    def reload(self) -> None:
        """Drop cached data so the next access re-reads the file."""
        self._dataset = None
        self._index = None
