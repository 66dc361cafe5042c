import httpx
import logging
from typing import Optional

from listing_writer.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class OpenRouterClient:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or default_settings
        self.api_key = settings.openrouter_api_key
        self.base_url = settings.openrouter_base_url.rstrip("/")
        self.model = settings.openrouter_model
        self.timeout = settings.generation_timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "X-Title": "Car Listing Writer",
        }

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    async def chat_completion(
        self,
        messages: list[dict],
        temperature: float = 0.7,
        max_tokens: int = 1500,
        **kwargs,
    ) -> Optional[str]:
        """
        Returns the first choice's message content, or None when the
        service sent back no text.
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            logger.info(f"Chat completion request: model={self.model}")
            response = await client.post(
                f"{self.base_url}/chat/completions", headers=self.headers, json=payload
            )
            response.raise_for_status()
            data = response.json()

        choices = data.get("choices") or []
        if not choices:
            return None
        return (choices[0].get("message") or {}).get("content")
