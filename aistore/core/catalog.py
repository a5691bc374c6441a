import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from aistore.core.config import settings
from aistore.schemas.product import Product

logger = logging.getLogger(__name__)

# Served when the catalog file cannot be read, so the store still renders
FALLBACK_CATALOG: tuple[Product, ...] = (
    Product(
        id=1,
        name="Nike Air Max 270 Running Shoes",
        price=120,
        category="footwear",
        description="Comfortable running shoes with air cushioning technology",
        rating=4.5,
        image="https://images.example.com/products/nike-air-max-270.png",
    ),
)

_products_adapter = TypeAdapter(list[Product])

catalog: tuple[Product, ...] | None = None


def read_catalog(path: str | Path) -> tuple[Product, ...]:
    """Read and validate a JSON array of products. Raises on any problem."""
    raw = Path(path).read_text(encoding="utf-8")
    products = _products_adapter.validate_python(json.loads(raw))

    seen: set[int] = set()
    for product in products:
        if product.id in seen:
            raise ValueError(f"Duplicate product id {product.id} in {path}")
        seen.add(product.id)

    return tuple(products)


def load_catalog(path: str | Path | None = None) -> tuple[Product, ...]:
    """Load the catalog once; never raises, falls back to the built-in record."""
    global catalog
    path = path or settings.CATALOG_PATH
    try:
        catalog = read_catalog(path)
        logger.info(f"Loaded {len(catalog)} products from {path}")
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        logger.error(f"Error loading catalog from {path}: {e}. Using fallback catalog.")
        catalog = FALLBACK_CATALOG
    return catalog


def get_catalog() -> tuple[Product, ...]:
    if catalog is None:
        return load_catalog()
    return catalog


def reset_catalog() -> None:
    global catalog
    catalog = None
