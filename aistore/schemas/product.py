from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """Catalog record, loaded once at startup and never mutated"""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: str
    description: str = ""
    rating: float = Field(default=0.0, ge=0, le=5)
    image: str = ""


class CategoriesResponse(BaseModel):
    """Category options for the category selector ("all" first)"""

    categories: list[str]
