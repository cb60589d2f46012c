"""
Product description generation.

Writes short Portuguese sales copy for the admin product form using
the OpenAI chat completions API. Generation is a convenience: any
failure degrades to a fixed message the admin can overwrite.
"""

from __future__ import annotations

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MAX_DESCRIPTION_CHARS = 300
DEFAULT_CATEGORY = "Geral"

UNAVAILABLE_TEXT = "Descrição não disponível no momento."
ERROR_TEXT = "Erro ao gerar descrição. Por favor, tente novamente."


def build_prompt(product_name: str, category: str) -> str:
    """Build the copywriting prompt for a product."""
    return (
        f"Crie uma descrição de venda atraente, curta (máximo {MAX_DESCRIPTION_CHARS} "
        f"caracteres) e profissional em português para o seguinte produto: "
        f'"{product_name}" da categoria "{category}". Fale sobre os benefícios principais.'
    )


class DescriptionGenerator:
    """Generates product descriptions with an OpenAI chat model."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            base_url: Optional base URL for compatible endpoints
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._client: Any = None

    @classmethod
    def from_env(cls) -> DescriptionGenerator:
        """
        Create a generator from environment variables.

        Required env vars:
            OPENAI_API_KEY: OpenAI API key

        Optional env vars:
            OPENAI_DESCRIPTION_MODEL: Model name (default: gpt-4o-mini)
            OPENAI_BASE_URL: Custom base URL
        """
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable required")

        return cls(
            api_key=api_key,
            model=os.environ.get("OPENAI_DESCRIPTION_MODEL", DEFAULT_MODEL),
            base_url=os.environ.get("OPENAI_BASE_URL"),
        )

    async def _ensure_client(self) -> Any:
        """Lazy initialize the OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def generate(self, product_name: str, category: str | None = None) -> str:
        """
        Generate a description for a product.

        Args:
            product_name: Product display name
            category: Category name (default: "Geral")

        Returns:
            The generated text, UNAVAILABLE_TEXT for an empty reply,
            or ERROR_TEXT if the request failed
        """
        prompt = build_prompt(product_name, category or DEFAULT_CATEGORY)
        try:
            client = await self._ensure_client()
            response = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.error(f"Error generating description for '{product_name}': {e}")
            return ERROR_TEXT

        text = (response.choices[0].message.content or "").strip() if response.choices else ""
        return text or UNAVAILABLE_TEXT

    async def close(self) -> None:
        """Close the underlying client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
