"""Search service: plain and AI-assisted catalog search"""

import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from aistore.core.catalog import get_catalog
from aistore.schemas.product import Product
from aistore.schemas.search import SearchFilter
from aistore.services.filter_service import (
    apply_filter,
    build_plain_filter,
    describe_filter,
    filter_catalog,
)
from aistore.services.query_interpreter import get_query_interpreter

logger = logging.getLogger(__name__)


class SearchSequencer:
    """
    Keeps the displayed result in step with the most recently issued search.

    Every search takes a monotonically increasing sequence number. A finished
    search is published only if no newer search has been issued since, so a
    slow response can never overwrite the result of a later query.
    """

    def __init__(self):
        self._issued = 0
        self._latest: dict[str, Any] | None = None

    @property
    def issued(self) -> int:
        return self._issued

    @property
    def latest(self) -> dict[str, Any] | None:
        return self._latest

    def issue(self) -> int:
        self._issued += 1
        return self._issued

    def is_current(self, sequence: int) -> bool:
        return sequence == self._issued

    def publish(self, sequence: int, outcome: dict[str, Any]) -> bool:
        if not self.is_current(sequence):
            logger.info(f"Discarding stale search #{sequence} (latest issued #{self._issued})")
            return False
        self._latest = outcome
        return True


class SearchService:
    """
    Handles catalog search in two modes.

    Plain mode: category / price widgets plus a case-insensitive substring
    match of the raw query against name and description.

    AI mode: the widgets narrow the catalog first, then the query is
    interpreted by the language model into a SearchFilter which is applied to
    what is left. Interpretation failures degrade to "no AI filters".

    Both modes share the same filter evaluator.
    """

    def __init__(
        self,
        query_interpreter,
        catalog: Sequence[Product] | None = None,
        sequencer: SearchSequencer | None = None,
    ):
        self.query_interpreter = query_interpreter
        self._catalog = catalog
        self.sequencer = sequencer or SearchSequencer()

    @property
    def catalog(self) -> Sequence[Product]:
        if self._catalog is not None:
            return self._catalog
        return get_catalog()

    async def search(
        self,
        query: str,
        ai_mode: bool = False,
        category: str | None = None,
        price_min: float | None = None,
        price_max: float | None = None,
    ) -> dict[str, Any]:
        """
        Run one search against the catalog.

        Args:
            query: Free-text query (may be blank)
            ai_mode: Interpret the query with the language model
            category: Category selector value, "all" or None for any
            price_min: Lower bound of the price slider
            price_max: Upper bound of the price slider

        Returns:
            dict with mode, filters_detected, ui_filters, explanation and results
        """
        products = self.catalog
        ui_filters = build_plain_filter(category=category, price_min=price_min, price_max=price_max)

        if ai_mode:
            if query.strip():
                filters_detected = await self.query_interpreter.interpret(query)
            else:
                filters_detected = SearchFilter()
            results = filter_catalog(products, ui_filters, filters_detected)
            explanation = describe_filter(filters_detected)
            if not ui_filters.is_empty():
                explanation = f"{explanation} (within {describe_filter(ui_filters)})"
        else:
            filters_detected = build_plain_filter(
                query=query, category=category, price_min=price_min, price_max=price_max
            )
            results = apply_filter(filters_detected, products)
            explanation = describe_filter(filters_detected)

        mode = "ai" if ai_mode else "plain"
        logger.info(f"🔍 Search ({mode}) query={query!r}: {explanation} -> {len(results)} results")

        return {
            "query": query,
            "mode": mode,
            "filters_detected": filters_detected,
            "ui_filters": ui_filters,
            "explanation": explanation,
            "results": results,
            "total_results": len(results),
        }

    async def submit(
        self,
        query: str,
        ai_mode: bool = False,
        category: str | None = None,
        price_min: float | None = None,
        price_max: float | None = None,
    ) -> dict[str, Any]:
        """Run a search and publish it as the displayed result unless superseded"""
        sequence = self.sequencer.issue()
        outcome = await self.search(
            query, ai_mode=ai_mode, category=category, price_min=price_min, price_max=price_max
        )
        outcome["sequence"] = sequence
        outcome["superseded"] = False
        if not self.sequencer.publish(sequence, outcome):
            outcome = {**outcome, "superseded": True}
        return outcome

    def latest(self) -> dict[str, Any] | None:
        """Most recently displayed search outcome"""
        return self.sequencer.latest


@lru_cache
def get_search_service() -> SearchService:
    """Get cached search service instance"""
    return SearchService(query_interpreter=get_query_interpreter())
