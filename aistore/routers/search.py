from fastapi import APIRouter, HTTPException, status

from aistore.schemas.search import (
    InterpretRequest,
    InterpretResponse,
    SearchRequest,
    SearchResponse,
)
from aistore.services.filter_service import describe_filter
from aistore.services.query_interpreter import get_query_interpreter
from aistore.services.search_service import get_search_service

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=SearchResponse)
async def search_products(request: SearchRequest):
    """
    Search the catalog, optionally with AI query interpretation.

    **Plain mode** (`ai_mode: false`): category and price widgets plus a
    case-insensitive substring match of the query on name and description.

    **AI mode** (`ai_mode: true`): the language model turns the query into a
    filter (price range, category, brand, minimum rating, search terms) which
    is applied on top of the widgets. If the model is unavailable the search
    still succeeds, just without AI filters.

    Examples:
        ```json
        {"query": "running shoes under $100 with good reviews", "ai_mode": true}

        {"query": "jacket", "category": "clothing", "price_max": 150}
        ```

    Returns:
        SearchResponse with matching products in catalog order and the
        filters that were applied
    """
    try:
        search_service = get_search_service()
        result = await search_service.submit(
            request.query,
            ai_mode=request.ai_mode,
            category=request.category,
            price_min=request.price_min,
            price_max=request.price_max,
        )
        return SearchResponse(**result)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}") from e


@router.get("/latest", response_model=SearchResponse)
async def latest_search():
    """Result of the most recently issued search that has completed"""
    result = get_search_service().latest()
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No search has been run yet",
        )
    return SearchResponse(**result)


@router.post("/interpret", response_model=InterpretResponse)
async def interpret_query(request: InterpretRequest):
    """Show the filter the language model derives from a query, without searching"""
    filters = await get_query_interpreter().interpret(request.query)
    return InterpretResponse(
        query=request.query,
        filters_detected=filters,
        explanation=describe_filter(filters),
    )
