"""
Catalog model.

Entity dataclasses, built-in defaults, the pure state transforms
applied by the reconciler, and read-only queries for the views.
"""

from .defaults import (
    ALL_CATEGORIES,
    default_banner,
    default_categories,
    default_products,
    default_state,
    migrate_cached_state,
)
from .descriptions import DescriptionGenerator
from .transforms import MAX_FEATURED_PRODUCTS
from .types import AppState, Banner, CategoryItem, Product

__all__ = [
    "AppState",
    "Banner",
    "CategoryItem",
    "Product",
    "ALL_CATEGORIES",
    "MAX_FEATURED_PRODUCTS",
    "default_banner",
    "default_categories",
    "default_products",
    "default_state",
    "migrate_cached_state",
    "DescriptionGenerator",
]
