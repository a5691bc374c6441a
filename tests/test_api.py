API_PREFIX = "/api/v1"


def test_health(test_client):
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_list_products_returns_bundled_catalog(test_client):
    response = test_client.get(f"{API_PREFIX}/products")
    assert response.status_code == 200
    body = response.json()
    assert len(body) == 16
    assert [p["id"] for p in body] == sorted(p["id"] for p in body)


def test_get_product(test_client):
    response = test_client.get(f"{API_PREFIX}/products/6")
    assert response.status_code == 200
    assert response.json()["name"] == "Apple Watch Series 9"


def test_get_missing_product(test_client):
    response = test_client.get(f"{API_PREFIX}/products/999")
    assert response.status_code == 404


def test_categories(test_client):
    response = test_client.get(f"{API_PREFIX}/products/categories")
    assert response.status_code == 200
    assert response.json() == {"categories": ["all", "footwear", "electronics", "clothing"]}


def test_ai_search(test_client, openai_client):
    openai_client.chat.completions.create.return_value.choices[0].message.content = (
        'Here you go: {"priceMax": 100, "category": "footwear", "minRating": 4.0} Hope this helps!'
    )

    response = test_client.post(
        f"{API_PREFIX}/search",
        json={"query": "running shoes under $100 with good reviews", "ai_mode": True},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "ai"
    assert body["filters_detected"]["priceMax"] == 100
    assert body["filters_detected"]["category"] == "footwear"
    assert body["filters_detected"]["minRating"] == 4.0
    assert body["filters_detected"]["searchTerms"] is None
    assert [p["id"] for p in body["results"]] == [2]
    assert body["total_results"] == 1
    assert body["sequence"] == 1
    assert body["superseded"] is False


def test_ai_search_model_failure_still_returns_results(test_client, openai_client, products):
    openai_client.chat.completions.create.side_effect = RuntimeError("quota exceeded")

    response = test_client.post(f"{API_PREFIX}/search", json={"query": "anything", "ai_mode": True})

    assert response.status_code == 200
    assert response.json()["total_results"] == len(products)


def test_plain_search_no_matches_is_not_an_error(test_client):
    response = test_client.post(f"{API_PREFIX}/search", json={"query": "espresso machine"})
    assert response.status_code == 200
    assert response.json()["results"] == []


def test_search_rejects_inverted_price_range(test_client):
    response = test_client.post(
        f"{API_PREFIX}/search",
        json={"query": "shoes", "price_min": 200, "price_max": 100},
    )
    assert response.status_code == 422


def test_latest_search(test_client):
    assert test_client.get(f"{API_PREFIX}/search/latest").status_code == 404

    test_client.post(f"{API_PREFIX}/search", json={"query": "jeans"})
    response = test_client.get(f"{API_PREFIX}/search/latest")

    assert response.status_code == 200
    assert response.json()["query"] == "jeans"
    assert [p["id"] for p in response.json()["results"]] == [5]


def test_interpret_endpoint(test_client, openai_client):
    openai_client.chat.completions.create.return_value.choices[0].message.content = (
        '{"brand": "Apple", "category": "Electronics"}'
    )

    response = test_client.post(f"{API_PREFIX}/search/interpret", json={"query": "apple gadgets"})

    assert response.status_code == 200
    body = response.json()
    assert body["filters_detected"]["brand"] == "Apple"
    assert body["filters_detected"]["category"] == "electronics"
    assert body["explanation"] == 'category electronics, brand "Apple"'
