"""
Compound Catalog Package

This package provides the read-only catalog of compounds available to a
flowsheet simulation, with the identifiers shown in the compounds editor
and the constant properties referenced by every stream phase.

Author: Flowsheet Compounds Development Team
"""

from .catalog import (
    Catalog,
    CatalogEntry,
    CatalogError,
    CATALOG_DATA,
    get_catalog,
    load_catalog
)

__all__ = [
    'Catalog',
    'CatalogEntry',
    'CatalogError',
    'CATALOG_DATA',
    'get_catalog',
    'load_catalog'
]
