"""
Built-in catalog content and cache migration.

Used when neither the remote store nor the local cache can provide
a catalog, and to patch cache blobs written before categories and
banners existed.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from .types import AppState, Banner, CategoryItem, Product

ALL_CATEGORIES = "Tudo"

_MARKETPLACE_URL = "https://www.mercadolivre.com.br/"
_IMAGE_BASE = "https://lh3.googleusercontent.com/aida-public/"

INITIAL_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="1",
        name="iPhone 15 Pro - 128GB Titânio Azul",
        category="Eletrônicos",
        price=7999.00,
        original_price=8599.00,
        image_url=_IMAGE_BASE + "iphone-15-pro-titanio-azul",
        affiliate_url=_MARKETPLACE_URL,
        description=(
            "O iPhone 15 Pro é o primeiro iPhone com design em titânio de qualidade "
            "aeroespacial, feito com a mesma liga das naves espaciais enviadas em "
            "missões a Marte."
        ),
        is_featured=True,
        rating=4.8,
        reviews_count=1240,
    ),
    Product(
        id="2",
        name='iPad Air M2 11" 128GB Wi-Fi Cinza Espacial',
        category="Eletrônicos",
        price=5599.00,
        image_url=_IMAGE_BASE + "ipad-air-m2-cinza-espacial",
        affiliate_url=_MARKETPLACE_URL,
        description=(
            "O iPad Air redesenhado. Agora com o chip M2 superveloz, tela Liquid "
            "Retina espetacular e disponível em dois tamanhos."
        ),
        is_featured=True,
        rating=4.9,
        reviews_count=856,
    ),
    Product(
        id="3",
        name="Sony WH-1000XM5 Cancelamento de Ruído",
        category="Eletrônicos",
        price=2499.00,
        image_url=_IMAGE_BASE + "sony-wh-1000xm5",
        affiliate_url=_MARKETPLACE_URL,
        description=(
            "Os fones de ouvido WH-1000XM5 redefinem a audição sem distrações e a "
            "nitidez das chamadas com dois processadores que controlam oito microfones."
        ),
        is_featured=True,
        rating=5.0,
        reviews_count=2400,
    ),
    Product(
        id="4",
        name="Elite Series X Smart Watch - Branco",
        category="Eletrônicos",
        price=899.00,
        image_url=_IMAGE_BASE + "elite-series-x-branco",
        affiliate_url=_MARKETPLACE_URL,
        description=(
            "O Elite Series X é o smartwatch definitivo para quem busca performance e "
            "elegância. Monitoramento de saúde avançado e bateria de longa duração."
        ),
        is_featured=True,
        rating=4.5,
        reviews_count=120,
    ),
)

DEFAULT_CATEGORIES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("1", "Eletrônicos", ("Celulares", "TVs", "Notebooks", "Fones")),
    ("2", "Casa", ("Eletrodomésticos", "Decoração", "Móveis")),
    ("3", "Moda", ("Roupas", "Sapatos", "Acessórios")),
    ("4", "Beleza", ("Perfumes", "Maquiagem", "Skincare")),
)

DEFAULT_BANNER_ID = "default-banner"


def default_products() -> list[Product]:
    """Return fresh copies of the built-in product list."""
    return [replace(p) for p in INITIAL_PRODUCTS]


def default_categories() -> list[CategoryItem]:
    """Return the four built-in categories."""
    return [
        CategoryItem(id=cat_id, name=name, subcategories=list(subs))
        for cat_id, name, subs in DEFAULT_CATEGORIES
    ]


def default_banner() -> Banner:
    """Return the built-in promotional banner."""
    return Banner(
        id=DEFAULT_BANNER_ID,
        title="Ofertas da Semana",
        subtitle="Os melhores preços selecionados para você",
        link_url=f"/category/{ALL_CATEGORIES}",
        desktop_image_url=_IMAGE_BASE + "banner-ofertas-desktop",
        mobile_image_url=_IMAGE_BASE + "banner-ofertas-mobile",
    )


def default_state() -> AppState:
    """Build the state used when no cache blob exists."""
    return AppState(
        products=default_products(),
        favorites=[],
        categories=default_categories(),
        banners=[default_banner()],
    )


def migrate_cached_state(blob: dict[str, Any]) -> AppState:
    """Load a cache blob, injecting sections that older versions did not write.

    A blob without a categories field gets the four default categories and
    a blob without a banners field gets the default banner. Sections that
    are present, even when empty, are kept as they are.
    """
    patched = dict(blob)
    if patched.get("categories") is None:
        patched["categories"] = [c.to_dict() for c in default_categories()]
    if patched.get("banners") is None:
        patched["banners"] = [default_banner().to_dict()]
    return AppState.from_dict(patched)
