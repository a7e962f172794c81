"""Product catalog providers.

Provides:
- CatalogProvider: interface the engine reads products from
- GeneratedCatalog: the synthetic sports catalog used by the demo storefront
- StaticCatalog: wraps an explicit product sequence (tests, embedding)
"""

import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from .config import CATALOG_SEED, CATALOG_SIZE
from .models import Product

logger = logging.getLogger(__name__)

SPORTS = (
    "Basketball",
    "Soccer",
    "Tennis",
    "Running",
    "Gym",
    "Cycling",
    "Swimming",
    "Golf",
    "Trecking",
    "Winter Sports",
)
BRANDS = (
    "Peak Performance",
    "Velocity",
    "Apex Sports",
    "Core Athletics",
    "Titan Gear",
    "Swift",
    "Endurance",
    "Nova",
)
CATEGORIES = (
    "Footwear",
    "Apparel",
    "Equipment",
    "Accessories",
    "Shoes",
    "Torso",
    "Trecking Gear",
    "Thermal Suits",
    "Wearables",
)


class CatalogProvider:
    """Interface for catalog sources."""
    def get_catalog(self) -> Tuple[Product, ...]:
        # Return the full, ordered product list; must not change between calls
        raise NotImplementedError


class StaticCatalog(CatalogProvider):
    def __init__(self, products: Sequence[Product]) -> None:
        self._products = tuple(products)

    def get_catalog(self) -> Tuple[Product, ...]:
        return self._products


def placeholder_image(sport: str, category: str) -> str:
    query = f"{sport.lower()}+{category.lower()}".replace(" ", "+")
    return f"/placeholder.svg?height=400&width=400&query={query}"


def product_name(index: int, brand: str, sport: str, category: str) -> str:
    variant = index % 2 == 0
    if category in ("Shoes", "Footwear"):
        return f"{brand} {sport} Elite {'Pro' if variant else 'Swift'} Shoes"
    if category in ("Torso", "Apparel"):
        return f"{brand} {sport} Performance {'Jersey' if variant else 'Compression Top'}"
    if category == "Trecking Gear":
        return f"{brand} All-Terrain {'Mountain Pack' if variant else 'Climbing Harness'}"
    if category == "Thermal Suits":
        return f"{brand} {sport} Arctic-Shield Thermal Suit"
    if category == "Wearables":
        return f"{brand} Smart-Track {sport} Monitor"
    return f"{brand} {sport} {category}"


def generate_products(size: int = CATALOG_SIZE, seed: Optional[int] = CATALOG_SEED) -> Tuple[Product, ...]:
    """Build the demo catalog.

    Sport, brand and category cycle through their label lists by index, so
    the label mix is fixed; price (20-169), rating (3-5) and reviews
    (10-509) are drawn from a random generator seeded with seed.
    """
    rng = random.Random(seed)
    products: List[Product] = []
    for i in range(size):
        sport = SPORTS[i % len(SPORTS)]
        brand = BRANDS[i % len(BRANDS)]
        category = CATEGORIES[i % len(CATEGORIES)]
        rating = rng.randint(3, 5)
        products.append(
            Product(
                id=f"prod-{i + 1}",
                name=product_name(i, brand, sport, category),
                brand=brand,
                sport=sport,
                category=category,
                price=float(rng.randint(20, 169)),
                rating=rating,
                reviews=rng.randint(10, 509),
                image=placeholder_image(sport, category),
            )
        )
    return tuple(products)


class GeneratedCatalog(CatalogProvider):
    """Synthetic catalog, generated once and immutable afterwards."""

    def __init__(self, size: int = CATALOG_SIZE, seed: Optional[int] = CATALOG_SEED) -> None:
        self._products = generate_products(size, seed)
        logger.info("Generated catalog with %d products (seed=%s)", len(self._products), seed)

    def get_catalog(self) -> Tuple[Product, ...]:
        return self._products


def facet_values(products: Sequence[Product]) -> Dict[str, List]:
    """Distinct sidebar options per criterion, sorted (ratings high to low)."""
    return {
        "sports": sorted({p.sport for p in products}),
        "brands": sorted({p.brand for p in products}),
        "categories": sorted({p.category for p in products}),
        "ratings": sorted({p.rating for p in products}, reverse=True),
    }
