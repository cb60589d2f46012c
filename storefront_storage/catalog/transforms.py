"""
Pure state transforms.

Each function takes the current AppState plus the operation input and
returns a new AppState. Inputs are never mutated, so a caller can keep
the previous snapshot around (listeners, tests) without copying it.
"""

from __future__ import annotations

from dataclasses import replace

from ..exceptions import EntityNotFoundError, FeaturedLimitError
from .types import AppState, Banner, CategoryItem, Product

MAX_FEATURED_PRODUCTS = 10


# Products


def add_product(state: AppState, product: Product) -> AppState:
    """Prepend a product so the newest addition is listed first."""
    return replace(state, products=[product, *state.products])


def update_product(state: AppState, product: Product) -> AppState:
    """Replace the product with the same ID; unknown IDs leave products as they are."""
    return replace(
        state,
        products=[product if p.id == product.id else p for p in state.products],
    )


def delete_product(state: AppState, product_id: str) -> AppState:
    """Remove the product with the given ID.

    Favorites are left untouched and may keep a dangling ID.
    """
    return replace(state, products=[p for p in state.products if p.id != product_id])


def toggle_favorite(state: AppState, product_id: str) -> AppState:
    """Add the ID to favorites, or remove it if already present."""
    if product_id in state.favorites:
        favorites = [f for f in state.favorites if f != product_id]
    else:
        favorites = [*state.favorites, product_id]
    return replace(state, favorites=favorites)


def toggle_featured(state: AppState, product_id: str) -> Product:
    """Return the product with its featured flag flipped.

    Raises:
        EntityNotFoundError: If no product has the ID
        FeaturedLimitError: If featuring it would exceed MAX_FEATURED_PRODUCTS
    """
    product = next((p for p in state.products if p.id == product_id), None)
    if product is None:
        raise EntityNotFoundError("product", product_id)

    if not product.is_featured:
        featured_count = sum(1 for p in state.products if p.is_featured)
        if featured_count >= MAX_FEATURED_PRODUCTS:
            raise FeaturedLimitError(MAX_FEATURED_PRODUCTS)

    return replace(product, is_featured=not product.is_featured)


# Categories


def add_category(state: AppState, category: CategoryItem) -> AppState:
    """Append a category."""
    return replace(state, categories=[*state.categories, category])


def update_category(state: AppState, category: CategoryItem) -> AppState:
    """Replace the category with the same ID."""
    return replace(
        state,
        categories=[category if c.id == category.id else c for c in state.categories],
    )


def add_subcategory(state: AppState, category_id: str, subcategory: str) -> AppState:
    """Append a subcategory name to a category.

    Names are not deduplicated: adding an existing name appends it again.
    """
    return replace(
        state,
        categories=[
            replace(c, subcategories=[*c.subcategories, subcategory])
            if c.id == category_id
            else c
            for c in state.categories
        ],
    )


def delete_category(state: AppState, category_id: str) -> AppState:
    """Remove the category with the given ID.

    Products pointing at it are kept and simply stop matching any view.
    """
    return replace(state, categories=[c for c in state.categories if c.id != category_id])


def find_category(state: AppState, category_id: str) -> CategoryItem | None:
    """Look up a category by ID."""
    return next((c for c in state.categories if c.id == category_id), None)


# Banners


def add_banner(state: AppState, banner: Banner) -> AppState:
    """Append a banner; the last banner is the one on display."""
    return replace(state, banners=[*state.banners, banner])


def remove_banner(state: AppState, banner_id: str) -> AppState:
    """Remove the banner with the given ID."""
    return replace(state, banners=[b for b in state.banners if b.id != banner_id])
