from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from aistore.schemas.product import Product


class SearchFilter(BaseModel):
    """
    Structured constraints derived from a search query.

    Every field is optional and None means "no constraint on this dimension",
    so SearchFilter() matches the whole catalog. Input accepts the camelCase
    keys the model is asked for plus the snake_case spellings other clients
    use; output always uses camelCase.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    price_min: float | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("priceMin", "price_min", "min_price", "minPrice"),
        serialization_alias="priceMin",
    )
    price_max: float | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("priceMax", "price_max", "max_price", "maxPrice"),
        serialization_alias="priceMax",
    )
    category: str | None = None
    brand: str | None = Field(
        default=None,
        validation_alias=AliasChoices("brand", "keyword"),
    )
    min_rating: float | None = Field(
        default=None,
        ge=0,
        le=5,
        validation_alias=AliasChoices("minRating", "min_rating"),
        serialization_alias="minRating",
    )
    search_terms: str | None = Field(
        default=None,
        validation_alias=AliasChoices("searchTerms", "search_terms"),
        serialization_alias="searchTerms",
    )

    @field_validator("category", "brand", "search_terms", mode="before")
    @classmethod
    def _blank_text_is_absent(cls, value: Any) -> Any:
        # Text is kept verbatim; matching is a raw substring test
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("price_min", "price_max", "min_rating", mode="before")
    @classmethod
    def _loose_number(cls, value: Any) -> Any:
        # Models occasionally answer "$100" or "1,200" instead of a bare number
        if isinstance(value, str):
            cleaned = value.strip().replace("$", "").replace(",", "")
            if not cleaned:
                return None
            return cleaned
        return value

    def is_empty(self) -> bool:
        """True when no dimension is constrained (the fail-open filter)"""
        return all(value is None for value in self.model_dump().values())


class SearchRequest(BaseModel):
    """Search request: free-text query, AI toggle and the plain filter widgets"""

    query: str = Field(default="", description="Free-text search query")
    ai_mode: bool = Field(
        default=False,
        description="Interpret the query with the language model instead of plain substring matching",
    )
    category: str | None = Field(default=None, description='Category selector value ("all" for no constraint)')
    price_min: float | None = Field(default=None, ge=0, description="Lower bound of the price slider")
    price_max: float | None = Field(default=None, ge=0, description="Upper bound of the price slider")

    @model_validator(mode="after")
    def _check_price_range(self) -> "SearchRequest":
        if self.price_min is not None and self.price_max is not None and self.price_min > self.price_max:
            raise ValueError("price_min must not be greater than price_max")
        return self


class SearchResponse(BaseModel):
    """Response model for search results"""

    query: str
    mode: Literal["ai", "plain"]
    sequence: int | None = None  # Position of this search in the issue order
    superseded: bool = False  # A newer search was issued before this one finished
    filters_detected: SearchFilter  # Filter resolved from the query
    ui_filters: SearchFilter  # Filter built from the category / price widgets
    explanation: str
    results: list[Product]
    total_results: int


class InterpretRequest(BaseModel):
    """Query to translate into a SearchFilter without running a search"""

    query: str = Field(..., description="Natural language search query", min_length=1)


class InterpretResponse(BaseModel):
    query: str
    filters_detected: SearchFilter
    explanation: str
