"""OpenAI Responses API client for recipe generation."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from nutrition_ledger.domain.errors import RemoteServiceError
from nutrition_ledger.domain.plans import MealRequest
from nutrition_ledger.services.meal_plans import MealGenerator


@dataclass
class OpenAIMealClient(MealGenerator):
    """Meal generator backed by OpenAI structured outputs."""

    client: AsyncOpenAI
    model: str
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, model: str, store: bool = False
    ) -> "OpenAIMealClient":
        """Create an OpenAI meal client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model, store=store)

    async def generate(
        self, request: MealRequest, schema: dict[str, object]
    ) -> dict[str, object]:
        """Ask the model for one recipe matching the schema."""
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": build_prompt(request)}
                        ],
                    }
                ],
                text={
                    "format": {
                        "type": "json_schema",
                        "name": "recipe",
                        "strict": True,
                        "schema": schema,
                    }
                },
                store=self.store,
            )
        except OpenAIError as exc:
            raise RemoteServiceError("OpenAI recipe request failed") from exc
        output_text = response.output_text
        if not output_text:
            raise RemoteServiceError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise RemoteServiceError("OpenAI returned invalid JSON") from exc

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()


def build_prompt(request: MealRequest) -> str:
    """Describe the recipe constraints for the model."""
    meal = request.meal_type.lower()
    allergies = ", ".join(request.allergies) if request.allergies else "none"
    return (
        f"Generate a healthy {meal} recipe with these requirements:\n"
        f"- Cuisine: {request.cuisine}\n"
        f"- Diet type: {request.diet}\n"
        f"- Target calories: {request.target_calories}\n"
        f"- Budget: {request.budget}\n"
        f"- Allergies to avoid: {allergies}\n"
        f"- Make it different from typical {meal} meals\n"
        "List ingredients with amounts and instructions as short steps."
    )
