"""Movie Catalog - personal disc catalogs, wish lists and upcoming releases."""

__version__ = "0.1.0"
