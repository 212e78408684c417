from typing import Any

from google import genai
from google.genai.types import GenerateContentConfig

from src.core.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    name = "gemini"
    display_name = "Google Gemini"

    def _create_client(self) -> Any:
        return genai.Client(api_key=self.settings.api_key)

    async def generate(self, prompt: str) -> str:
        config = GenerateContentConfig(
            temperature=self.settings.temperature,
            max_output_tokens=self.settings.max_tokens,
        )
        response = await self.client.aio.models.generate_content(
            model=self.settings.model,
            contents=prompt,
            config=config,
        )
        return response.text or ""
