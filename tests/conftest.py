import pytest

from storefront_xray import FilterEngine, Product, StaticCatalog, TraceSink


def product(
    id: str,
    name: str,
    brand: str = "Nova",
    sport: str = "Gym",
    category: str = "Equipment",
    price: float = 50.0,
    rating: int = 4,
    reviews: int = 10,
) -> Product:
    return Product(
        id=id,
        name=name,
        brand=brand,
        sport=sport,
        category=category,
        price=price,
        rating=rating,
        reviews=reviews,
    )


@pytest.fixture
def make_product():
    return product


@pytest.fixture
def apex_shoe():
    return product("p1", "Apex Running Shoe", brand="Apex", sport="Running", category="Shoes")


@pytest.fixture
def mixed_catalog():
    """Six products across sports, brands, categories and ratings."""
    return [
        product("p1", "Velocity Running Elite Pro Shoes", brand="Velocity", sport="Running", category="Shoes", rating=5),
        product("p2", "Nova Golf Equipment", brand="Nova", sport="Golf", category="Equipment", rating=3),
        product("p3", "Swift Tennis Performance Jersey", brand="Swift", sport="Tennis", category="Apparel", rating=4),
        product("p4", "Nova Running Performance Compression Top", brand="Nova", sport="Running", category="Torso", rating=5),
        product("p5", "Titan Gear Golf Accessories", brand="Titan Gear", sport="Golf", category="Accessories", rating=4),
        product("p6", "Apex Sports Smart-Track Running Monitor", brand="Apex Sports", sport="Running", category="Wearables", rating=3),
    ]


@pytest.fixture
def sink():
    return TraceSink()


@pytest.fixture
def engine(mixed_catalog, sink):
    return FilterEngine(StaticCatalog(mixed_catalog), sink)
