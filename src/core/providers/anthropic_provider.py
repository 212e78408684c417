from typing import Any

import anthropic

from src.core.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    name = "anthropic"
    display_name = "Anthropic Claude"

    def _create_client(self) -> Any:
        return anthropic.AsyncAnthropic(api_key=self.settings.api_key, max_retries=0)

    async def generate(self, prompt: str) -> str:
        response = await self.client.messages.create(
            model=self.settings.model,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in (response.content or []) if getattr(block, "type", None) == "text"
        )
