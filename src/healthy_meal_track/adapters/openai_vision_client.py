"""OpenAI Responses API client for food signal detection."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from healthy_meal_track.services.vision import VisionClient

_INSTRUCTIONS = (
    "You label photos of meals for a nutrition tracker. Report only what is "
    "visible: image labels, detected objects and any printed text such as "
    "menu or package wording. Do not estimate portions or nutrients."
)


@dataclass
class OpenAIVisionClient(VisionClient):
    """Extracts raw food signals from a meal photo via the Responses API."""

    client: AsyncOpenAI
    image_detail: str = "auto"

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float = 60.0
    ) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds))

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return labels, objects and texts for one meal photo."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": _INSTRUCTIONS,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {
                            "type": "input_image",
                            "image_url": image_data_url,
                            "detail": self.image_detail,
                        },
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "food_signals",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        try:
            signals = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise RuntimeError("OpenAI returned invalid JSON") from exc
        if not isinstance(signals, dict):
            raise RuntimeError("OpenAI returned food signals that are not an object")
        return signals

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP client."""
        await self.client.close()
