"""
Catalog Module - Black Box Interface

Purpose: Load and validate script definitions from the catalog document
Interface: load_catalog(), find_script(), CatalogCache
Hidden: Document format, field validation, identifier derivation

Can be replaced with a catalog served from a ConfigMap API or a database.
"""

from .catalog import (
    CatalogCache,
    ParameterDeclaration,
    ScriptDefinition,
    find_script,
    load_catalog,
    parse_catalog,
    slugify,
)

__all__ = [
    "CatalogCache",
    "ParameterDeclaration",
    "ScriptDefinition",
    "find_script",
    "load_catalog",
    "parse_catalog",
    "slugify",
]
