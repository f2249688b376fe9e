"""OpenAI Responses API client for message generation."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from opener_studio.services.message_generation import MessageGenerationClient


@dataclass
class OpenAIMessageClient(MessageGenerationClient):
    """Message generation client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIMessageClient":
        """Create an OpenAI message client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate(
        self,
        *,
        model: str,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "outreach_messages",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP session."""
        await self.client.close()
