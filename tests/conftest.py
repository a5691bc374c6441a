from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from aistore.main import app
from aistore.schemas.product import Product
from aistore.services.query_interpreter import QueryInterpreter
from aistore.services.search_service import SearchService


def make_completion(content: str):
    """Shape of an OpenAI chat completion, reduced to what the interpreter reads"""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_openai_client(content: str = "{}", side_effect=None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=make_completion(content),
        side_effect=side_effect,
    )
    return client


@pytest.fixture
def products():
    return [
        Product(id=1, name="Nike Air Max 270 Running Shoes", price=120, category="footwear",
                description="Comfortable running shoes with air cushioning technology", rating=4.5),
        Product(id=2, name="Adidas Ultraboost Light", price=90, category="footwear",
                description="Lightweight running shoes with responsive cushioning", rating=4.6),
        Product(id=3, name="Apple Watch Series 9", price=399, category="electronics",
                description="Smartwatch with fitness tracking", rating=4.8),
        Product(id=4, name="Sony WH-1000XM5 Headphones", price=348, category="electronics",
                description="Noise cancelling wireless headphones", rating=4.6),
        Product(id=5, name="Levi's 501 Jeans", price=69.5, category="clothing",
                description="Classic straight leg denim", rating=4.3),
        Product(id=6, name="Budget Tee", price=12, category="clothing",
                description="Plain cotton t-shirt", rating=3.1),
    ]


@pytest.fixture
def openai_client_factory():
    return make_openai_client


@pytest.fixture
def openai_client():
    return make_openai_client()


@pytest.fixture
def interpreter(openai_client):
    return QueryInterpreter(client=openai_client)


@pytest.fixture
def search_service(interpreter, products):
    return SearchService(query_interpreter=interpreter, catalog=products)


@pytest.fixture(scope="function")
def test_client(mocker, interpreter, search_service):
    """
    TestClient wired to a search service with a mocked OpenAI client,
    so no request ever leaves the process.
    """
    mocker.patch("aistore.routers.search.get_search_service", return_value=search_service)
    mocker.patch("aistore.routers.search.get_query_interpreter", return_value=interpreter)

    # The app's lifespan (catalog load) is managed by the TestClient
    with TestClient(app) as client:
        yield client
