"""Query interpreter service to turn free-text queries into SearchFilters using an LLM"""

import asyncio
import json
import logging
from functools import lru_cache
from typing import Any

from openai import AsyncOpenAI
from pydantic import ValidationError

from aistore.core.config import settings
from aistore.schemas.search import SearchFilter

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()

_NULL_TOKENS = {"null", "none", "n/a"}

PROMPT_TEMPLATE = """You are a product search assistant. Analyze this search query: "{query}"

Extract the following information and return ONLY a JSON object:
{{
  "priceMin": number or null,
  "priceMax": number or null,
  "category": {category_options} or null,
  "brand": string or null,
  "minRating": number or null,
  "searchTerms": string or null
}}

RULES:
1. Prices are plain numbers in USD: "under $100" -> "priceMax": 100, "over $50" -> "priceMin": 50
2. "category" must be exactly one of the listed values, otherwise null
3. "good reviews" / "highly rated" -> "minRating": 4.0
4. "brand" is a brand or product-line name that appears in the product name
5. Leave a key null when the query does not mention it
6. Do not add any text before or after the JSON object

Examples:
- "running shoes under $100" -> {{"priceMax": 100, "category": "footwear", "searchTerms": "running shoes"}}
- "Apple electronics with good reviews" -> {{"category": "electronics", "brand": "Apple", "minRating": 4.0}}
- "clothing over $50" -> {{"priceMin": 50, "category": "clothing"}}
"""


def build_prompt(query: str, categories: list[str]) -> str:
    """Fixed instruction prompt with the literal user query embedded"""
    category_options = " or ".join(f'"{category}"' for category in categories)
    return PROMPT_TEMPLATE.format(query=query, category_options=category_options)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """
    Return the first well-formed JSON object embedded in text.

    Models sometimes wrap the object in prose or code fences, so each "{" is
    tried as a starting point until one decodes to a dict.
    """
    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)
    return None


def _match_category(value: str, categories: list[str]) -> str | None:
    wanted = value.strip().lower()
    for category in categories:
        if category.lower() == wanted:
            return category
    return None


def _strip_null_tokens(data: dict[str, Any]) -> dict[str, Any]:
    # Models spell "no value" as "null", "None" or "N/A" strings as well as JSON null
    cleaned = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if value.lower() in _NULL_TOKENS:
                continue
        cleaned[key] = value
    return cleaned


def _failing_keys(error: ValidationError, data: dict[str, Any]) -> set[str]:
    """Input keys of data named by the errors, either directly or through the field's aliases"""
    keys = set()
    for detail in error.errors():
        if not detail["loc"]:
            continue
        name = detail["loc"][0]
        if name in data:
            keys.add(name)
            continue
        field = SearchFilter.model_fields.get(name)
        if field is not None and field.validation_alias is not None:
            keys.update(alias for alias in field.validation_alias.choices if alias in data)
    return keys


def parse_filter(data: dict[str, Any], categories: list[str]) -> SearchFilter:
    """
    Validate a model-produced dict into a SearchFilter.

    Fields with unusable values are dropped and the rest kept; ValidationError
    is raised only if the remaining fields still fail. A category outside the
    closed set is dropped (unconstrained) too.
    """
    data = _strip_null_tokens(data)
    try:
        search_filter = SearchFilter.model_validate(data)
    except ValidationError as e:
        bad_keys = _failing_keys(e, data)
        if not bad_keys:
            raise
        logger.warning(f"Dropping invalid fields from model output: {sorted(bad_keys)}")
        search_filter = SearchFilter.model_validate({k: v for k, v in data.items() if k not in bad_keys})

    if search_filter.category is not None:
        canonical = _match_category(search_filter.category, categories)
        if canonical is None:
            logger.warning(f"Ignoring unknown category from model output: {search_filter.category!r}")
        search_filter = search_filter.model_copy(update={"category": canonical})

    return search_filter


class QueryInterpreter:
    """Translate natural language queries into structured search filters"""

    def __init__(self, client: AsyncOpenAI | None = None):
        if client is None and settings.OPENAI_API_KEY:
            client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_BASE_URL,
                timeout=settings.QUERY_INTERPRETER_TIMEOUT,
                max_retries=0,
            )
        self.client = client
        self.model = settings.QUERY_INTERPRETER_MODEL
        self.max_tokens = settings.QUERY_INTERPRETER_MAX_TOKENS
        self.timeout = settings.QUERY_INTERPRETER_TIMEOUT
        self.categories = list(settings.CATEGORIES)

    async def _complete(self, prompt: str) -> str:
        response = await asyncio.wait_for(
            self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,  # Deterministic
                max_tokens=self.max_tokens,
            ),
            timeout=self.timeout,
        )
        return response.choices[0].message.content or ""

    async def interpret(self, query: str) -> SearchFilter:
        """
        Interpret a user query into a SearchFilter.

        Never raises: any failure (missing key, network or API error, timeout,
        unparseable reply) returns SearchFilter(), i.e. no filtering.

        Args:
            query: Raw user query

        Returns:
            SearchFilter with the constraints found in the query
        """
        if not query.strip():
            return SearchFilter()

        if self.client is None:
            logger.warning("OPENAI_API_KEY is not configured; searching without AI filters")
            return SearchFilter()

        try:
            content = await self._complete(build_prompt(query, self.categories))
        except TimeoutError:
            logger.error(f"Query interpretation timed out after {self.timeout}s for query: {query!r}")
            return SearchFilter()
        except Exception as e:
            logger.error(f"Query interpretation error: {e}")
            return SearchFilter()

        data = extract_json_object(content)
        if data is None:
            logger.error(f"No JSON object in model response: {content!r}")
            return SearchFilter()

        try:
            search_filter = parse_filter(data, self.categories)
        except ValidationError as e:
            logger.error(f"Invalid filter in model response {data}: {e}")
            return SearchFilter()

        logger.info(f"Query interpretation result: {search_filter.model_dump(by_alias=True, exclude_none=True)}")
        return search_filter


@lru_cache
def get_query_interpreter() -> QueryInterpreter:
    """Get cached query interpreter instance"""
    return QueryInterpreter()
