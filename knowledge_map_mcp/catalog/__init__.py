from .loader import (
    DEFAULT_CATALOG_PATH,
    Catalog,
    CatalogError,
    get_catalog_path,
    load_catalog,
    load_raw_catalog,
    set_catalog_path,
)

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "Catalog",
    "CatalogError",
    "get_catalog_path",
    "load_catalog",
    "load_raw_catalog",
    "set_catalog_path",
]
