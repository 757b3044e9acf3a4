from typing import Optional

import httpx
import logging

from ..config import settings
from ..core.errors import ConfigurationError, FailurePolicy, ProviderError

logger = logging.getLogger("geant.llm")


class LLMClient:
    """Chat completion client for Groq's OpenAI-compatible endpoint."""

    failure_policy = FailurePolicy.PROPAGATE

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self.model = model or settings.llm_model
        self.base_url = base_url or settings.llm_base_url
        self.timeout = timeout or settings.llm_timeout
        self._transport = transport

    def _resolve_api_key(self) -> str:
        if self._api_key:
            return self._api_key
        if settings.groq_api_key is not None and settings.groq_api_key.get_secret_value():
            return settings.groq_api_key.get_secret_value()
        raise ConfigurationError("GROQ_API_KEY is required for answer generation.")

    async def chat(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.4,
        max_tokens: int = 1024,
    ) -> str:
        """
        Returns the content of the first choice, e.g. for
        {"choices": [{"message": {"role": "assistant", "content": "..."}}]}
        """
        api_key = self._resolve_api_key()
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(
                    self.base_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {api_key}"},
                )
        except httpx.HTTPError as exc:
            logger.error("Completion request failed (%s): %s", type(exc).__name__, exc)
            raise ProviderError(
                f"Completion request failed: {type(exc).__name__}",
                provider="completion",
            ) from exc

        if resp.is_error:
            logger.error(
                "Completion API error: status=%d body=%.200s",
                resp.status_code,
                resp.text,
            )
            raise ProviderError(
                f"Completion API error: {resp.status_code}",
                status_code=resp.status_code,
                provider="completion",
            )

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ProviderError(
                "Malformed completion response.",
                status_code=resp.status_code,
                provider="completion",
            ) from exc

        if not isinstance(content, str):
            raise ProviderError("Completion returned no text.", provider="completion")
        return content
