"""Predicate filtering of the in-memory catalog"""

from collections.abc import Iterable, Sequence

from aistore.schemas.product import Product
from aistore.schemas.search import SearchFilter

ALL_CATEGORIES = "all"


def _contains(haystack: str, needle: str) -> bool:
    # The only text matcher; plain and AI search both go through it
    return needle.lower() in haystack.lower()


def matches_filter(product: Product, search_filter: SearchFilter) -> bool:
    """True when the product satisfies every constraint present in the filter"""
    f = search_filter
    if f.price_min is not None and product.price < f.price_min:
        return False
    if f.price_max is not None and product.price > f.price_max:
        return False
    if f.category is not None and product.category != f.category:
        return False
    if f.min_rating is not None and product.rating < f.min_rating:
        return False
    if f.brand is not None and not _contains(product.name, f.brand):
        return False
    if f.search_terms is not None:
        if not (_contains(product.name, f.search_terms) or _contains(product.description, f.search_terms)):
            return False
    return True


def apply_filter(search_filter: SearchFilter, products: Iterable[Product]) -> list[Product]:
    """Order-preserving subsequence of products matching the filter"""
    return [product for product in products if matches_filter(product, search_filter)]


def filter_catalog(products: Sequence[Product], *filters: SearchFilter) -> list[Product]:
    """
    Narrow the catalog through each filter in turn.

    Used for AI mode, where the widget filter and the interpreted filter are
    applied one after the other; equivalent to AND-ing all of them.
    """
    result = list(products)
    for search_filter in filters:
        result = apply_filter(search_filter, result)
    return result


def build_plain_filter(
    query: str | None = None,
    category: str | None = None,
    price_min: float | None = None,
    price_max: float | None = None,
) -> SearchFilter:
    """
    Filter for the non-AI widgets.

    The category selector uses "all" for no constraint and the raw query is
    matched verbatim as a substring of name or description; only a blank
    query is treated as absent.
    """
    if category is not None and category.strip().lower() == ALL_CATEGORIES:
        category = None
    return SearchFilter(
        category=category,
        price_min=price_min,
        price_max=price_max,
        search_terms=query if query and query.strip() else None,
    )


def _format_price(value: float) -> str:
    return f"${value:g}"


def describe_filter(search_filter: SearchFilter) -> str:
    """Human-readable summary of the applied constraints"""
    f = search_filter
    parts = []
    if f.category is not None:
        parts.append(f"category {f.category}")
    if f.price_min is not None and f.price_max is not None:
        parts.append(f"price {_format_price(f.price_min)} - {_format_price(f.price_max)}")
    elif f.price_min is not None:
        parts.append(f"price >= {_format_price(f.price_min)}")
    elif f.price_max is not None:
        parts.append(f"price <= {_format_price(f.price_max)}")
    if f.min_rating is not None:
        parts.append(f"rating >= {f.min_rating:g}")
    if f.brand is not None:
        parts.append(f'brand "{f.brand}"')
    if f.search_terms is not None:
        parts.append(f'matching "{f.search_terms}"')
    return ", ".join(parts) if parts else "no filters"
