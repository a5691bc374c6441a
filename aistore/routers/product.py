from fastapi import APIRouter, Depends, HTTPException, status

from aistore.core.catalog import get_catalog
from aistore.core.config import settings
from aistore.schemas.product import CategoriesResponse, Product
from aistore.services.filter_service import ALL_CATEGORIES

router = APIRouter(prefix="/products", tags=["Products"])


def get_products() -> tuple[Product, ...]:
    return get_catalog()


# Must be defined BEFORE /{product_id}
@router.get("/categories", response_model=CategoriesResponse)
async def list_categories():
    """Category selector options."""
    return CategoriesResponse(categories=[ALL_CATEGORIES, *settings.CATEGORIES])


@router.get("", response_model=list[Product])
async def list_products(products: tuple[Product, ...] = Depends(get_products)):
    """Full catalog in catalog order."""
    return list(products)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int, products: tuple[Product, ...] = Depends(get_products)):
    """Single product by id."""
    for product in products:
        if product.id == product_id:
            return product
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"No product found for id: {product_id}",
    )
