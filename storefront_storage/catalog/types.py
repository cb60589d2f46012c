"""
Catalog entity types.

Defines the entities the storefront works with and the aggregate
AppState snapshot. Serialization uses the application's camelCase
field names, which is also the layout of the local cache blob.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Product:
    """A catalog product that links out to an affiliate offer.

    Attributes:
        id: Unique identifier (time-based for admin-created products)
        name: Display name
        category: Name of the owning category
        price: Current price
        image_url: Product image reference (URL or data URL)
        affiliate_url: External link that receives purchase intent
        description: Sales description
        subcategory: Optional subcategory name within the category
        original_price: Optional list price, shown as a discount
        is_featured: Shown in the featured strip
        is_best_seller: Shown in the best sellers strip and sorted first
        has_pix_discount: Offer has an instant-payment discount
        accepts_12x: Offer accepts twelve interest-free installments
        rating: Average rating (0-5)
        reviews_count: Number of reviews behind the rating
    """

    id: str
    name: str
    category: str
    price: float
    image_url: str
    affiliate_url: str
    description: str = ""
    subcategory: str | None = None
    original_price: float | None = None
    is_featured: bool = False
    is_best_seller: bool = False
    has_pix_discount: bool = False
    accepts_12x: bool = False
    rating: float = 5.0
    reviews_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary in the application's field convention."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "subcategory": self.subcategory,
            "price": self.price,
            "originalPrice": self.original_price,
            "imageUrl": self.image_url,
            "affiliateUrl": self.affiliate_url,
            "description": self.description,
            "isFeatured": self.is_featured,
            "isBestSeller": self.is_best_seller,
            "hasPixDiscount": self.has_pix_discount,
            "accepts_12x": self.accepts_12x,
            "rating": self.rating,
            "reviewsCount": self.reviews_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        """Deserialize from dictionary.

        Flags and counters missing from older cache blobs take their defaults.
        """
        original_price = data.get("originalPrice")
        rating = data.get("rating")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            category=data["category"],
            subcategory=data.get("subcategory") or None,
            price=float(data["price"]),
            original_price=float(original_price) if original_price is not None else None,
            image_url=data.get("imageUrl", ""),
            affiliate_url=data.get("affiliateUrl", ""),
            description=data.get("description", ""),
            is_featured=bool(data.get("isFeatured", False)),
            is_best_seller=bool(data.get("isBestSeller", False)),
            has_pix_discount=bool(data.get("hasPixDiscount", False)),
            accepts_12x=bool(data.get("accepts_12x", False)),
            rating=float(rating) if rating is not None else 5.0,
            reviews_count=int(data.get("reviewsCount") or 0),
        )


@dataclass
class CategoryItem:
    """A category with its ordered subcategory names.

    Subcategory names are not deduplicated.
    """

    id: str
    name: str
    subcategories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "subcategories": list(self.subcategories),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CategoryItem:
        """Deserialize from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            subcategories=list(data.get("subcategories") or []),
        )


@dataclass
class Banner:
    """A promotional banner with desktop and mobile artwork."""

    id: str
    desktop_image_url: str
    mobile_image_url: str
    title: str | None = None
    subtitle: str | None = None
    link_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "linkUrl": self.link_url,
            "desktopImageUrl": self.desktop_image_url,
            "mobileImageUrl": self.mobile_image_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Banner:
        """Deserialize from dictionary."""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or None,
            subtitle=data.get("subtitle") or None,
            link_url=data.get("linkUrl") or None,
            desktop_image_url=data.get("desktopImageUrl", ""),
            mobile_image_url=data.get("mobileImageUrl", ""),
        )


@dataclass
class AppState:
    """Snapshot of everything the storefront renders.

    This is the unit of local persistence and the unit handed to
    change listeners. It is replaced, never mutated, by the reconciler.

    Attributes:
        products: Catalog products, newest additions first
        favorites: Favorited product IDs in the order they were added
        categories: Categories in display order
        banners: Banners; the last one is the current banner
    """

    products: list[Product] = field(default_factory=list)
    favorites: list[str] = field(default_factory=list)
    categories: list[CategoryItem] = field(default_factory=list)
    banners: list[Banner] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the local cache blob layout."""
        return {
            "products": [p.to_dict() for p in self.products],
            "favorites": list(self.favorites),
            "categories": [c.to_dict() for c in self.categories],
            "banners": [b.to_dict() for b in self.banners],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppState:
        """Deserialize from a local cache blob.

        Missing sections become empty lists; default injection for
        older blobs is handled by catalog.defaults.migrate_cached_state.
        """
        return cls(
            products=[Product.from_dict(p) for p in data.get("products") or []],
            favorites=[str(f) for f in data.get("favorites") or []],
            categories=[CategoryItem.from_dict(c) for c in data.get("categories") or []],
            banners=[Banner.from_dict(b) for b in data.get("banners") or []],
        )
