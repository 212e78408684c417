from typing import Any

from langchain_openai import ChatOpenAI

from src.core.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    name = "openai"
    display_name = "OpenAI GPT"

    def _create_client(self) -> Any:
        # Retries are owned by the model invoker
        return ChatOpenAI(
            model_name=self.settings.model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            api_key=self.settings.api_key,
            max_retries=0,
        )

    async def generate(self, prompt: str) -> str:
        response = await self.client.ainvoke(prompt)
        content = response.content
        if isinstance(content, list):
            # Content blocks from newer chat models
            return "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return content or ""
