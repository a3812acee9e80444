"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest
from openai import OpenAIError

from nutrition_ledger.adapters.openai_meal_client import OpenAIMealClient, build_prompt
from nutrition_ledger.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from nutrition_ledger.adapters.spoonacular_client import HttpxSpoonacularClient
from nutrition_ledger.domain.errors import RemoteServiceError
from nutrition_ledger.domain.meals import MealType
from nutrition_ledger.domain.plans import MealRequest
from nutrition_ledger.services.meal_plans import RECIPE_SCHEMA

_REQUEST = MealRequest(
    meal_type=MealType.DINNER,
    target_calories=600,
    diet="keto",
    cuisine="italian",
    allergies=["shellfish"],
    budget="low",
)


class _FakeResponses:
    def __init__(self, output_text: str = "", error: bool = False) -> None:
        self.output_text = output_text
        self.error = error
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        if self.error:
            raise OpenAIError("boom")
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, responses: _FakeResponses) -> None:
        self.responses = responses


def test_openai_meal_client_parses_output() -> None:
    responses = _FakeResponses(json.dumps({"title": "Zucchini Lasagna"}))
    client = OpenAIMealClient(client=_FakeOpenAI(responses), model="gpt-5.2")

    result = asyncio.run(client.generate(_REQUEST, RECIPE_SCHEMA))

    assert result == {"title": "Zucchini Lasagna"}
    assert responses.last_payload is not None
    assert responses.last_payload["model"] == "gpt-5.2"
    assert responses.last_payload["store"] is False
    text_format = responses.last_payload["text"]["format"]
    assert text_format["type"] == "json_schema"
    assert text_format["schema"] is RECIPE_SCHEMA


@pytest.mark.parametrize(
    "responses",
    [_FakeResponses(error=True), _FakeResponses(""), _FakeResponses("{oops")],
)
def test_openai_meal_client_failures(responses: _FakeResponses) -> None:
    client = OpenAIMealClient(client=_FakeOpenAI(responses), model="gpt-5.2")

    with pytest.raises(RemoteServiceError):
        asyncio.run(client.generate(_REQUEST, RECIPE_SCHEMA))


def test_build_prompt_mentions_constraints() -> None:
    prompt = build_prompt(_REQUEST)

    assert "dinner" in prompt
    assert "italian" in prompt
    assert "600" in prompt
    assert "shellfish" in prompt


def test_spoonacular_client_sends_api_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/food/ingredients/search"):
            return httpx.Response(200, json={"results": [{"id": 9003}]})
        return httpx.Response(200, json={"name": "apple"})

    client = HttpxSpoonacularClient(
        api_key="spoon-key",
        base_url="https://api.spoonacular.com",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    search = asyncio.run(client.search_ingredients("apple"))
    info = asyncio.run(client.get_ingredient_information(9003))

    assert search["results"] == [{"id": 9003}]
    assert info == {"name": "apple"}
    assert seen[0].url.params["apiKey"] == "spoon-key"
    assert seen[0].url.params["query"] == "apple"
    assert seen[1].url.path == "/food/ingredients/9003/information"
    assert seen[1].url.params["amount"] == "100"
    assert seen[1].url.params["unit"] == "grams"


def test_spoonacular_client_wraps_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"message": "quota"})

    client = HttpxSpoonacularClient(
        api_key="spoon-key",
        base_url="https://api.spoonacular.com",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(RemoteServiceError):
        asyncio.run(client.search_ingredients("apple"))


def test_open_food_facts_client_search() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/cgi/search.pl"
        assert request.url.params["search_terms"] == "oat milk"
        assert request.url.params["json"] == "1"
        return httpx.Response(200, json={"products": []})

    client = HttpxOpenFoodFactsClient(
        base_url="https://world.openfoodfacts.org",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    assert asyncio.run(client.search_products("oat milk")) == {"products": []}


def test_open_food_facts_client_wraps_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    client = HttpxOpenFoodFactsClient(
        base_url="https://world.openfoodfacts.org",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(RemoteServiceError):
        asyncio.run(client.search_products("oat milk"))


def _html_page(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="<html>maintenance</html>")


def test_spoonacular_client_rejects_non_json_body() -> None:
    client = HttpxSpoonacularClient(
        api_key="spoon-key",
        base_url="https://api.spoonacular.com",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_html_page)),
    )

    with pytest.raises(RemoteServiceError):
        asyncio.run(client.get_ingredient_information(9003))


def test_open_food_facts_client_rejects_non_json_body() -> None:
    client = HttpxOpenFoodFactsClient(
        base_url="https://world.openfoodfacts.org",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_html_page)),
    )

    with pytest.raises(RemoteServiceError):
        asyncio.run(client.search_products("oat milk"))
