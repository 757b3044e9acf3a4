"""
Embedding Client

This module implements the query embedder backed by the Hugging Face
inference router (feature-extraction pipeline). It is responsible for:

- Enforcing the presence of the provider credential before any network call
- Network and transport error isolation
- Resolving the provider's response shape (flat vs. singly-nested) once, so
  downstream code always receives a flat vector

The class is stateless and safe to reuse across concurrent requests.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from ..config import settings
from ..core.errors import ConfigurationError, FailurePolicy, ProviderError

logger = logging.getLogger("geant.embedder")


EmbeddingVector = List[float]


class VectorShape(str, enum.Enum):
    FLAT = "flat"
    NESTED = "nested"


@dataclass(frozen=True)
class EmbeddingResponse:
    """
    Tagged embedding result.

    ``shape`` records how the provider encoded the vector; ``vector`` is
    always the flat row.
    """

    shape: VectorShape
    vector: EmbeddingVector


def _is_number_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in value
    )


def parse_embedding_response(data: Any) -> EmbeddingResponse:
    """
    Parse and validate the feature-extraction output.

    The router returns either ``[0.1, 0.2, ...]`` or ``[[0.1, 0.2, ...]]``
    depending on the model's pooling configuration.

    Raises
    ------
    ProviderError
        If the body is neither a flat vector nor a single-row matrix.
    """
    if _is_number_list(data):
        return EmbeddingResponse(VectorShape.FLAT, [float(x) for x in data])

    if isinstance(data, list) and len(data) == 1 and _is_number_list(data[0]):
        return EmbeddingResponse(VectorShape.NESTED, [float(x) for x in data[0]])

    raise ProviderError(
        "Embedding response is neither a flat vector nor a single-row matrix.",
        provider="embedding",
    )


class Embedder:
    """
    Asynchronous query embedder.

    This class performs no caching and no retries.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        failure_policy: Optional[FailurePolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize an Embedder.

        Parameters
        ----------
        api_key : Optional[str]
            Optional override for the Hugging Face token. When omitted the
            token is read from settings at call time.

        url : Optional[str]
            Feature-extraction endpoint. Defaults to settings.embedding_url.

        timeout : Optional[float]
            HTTP timeout for each request.

        failure_policy : Optional[FailurePolicy]
            How the pipeline should treat an embedding failure. Defaults to
            settings.embedding_failure_policy.

        transport : Optional[httpx.AsyncBaseTransport]
            Custom transport (used by tests).
        """
        self._api_key = api_key
        self.url = url or settings.embedding_url
        self.timeout = timeout or settings.embedding_timeout
        self.failure_policy = failure_policy or FailurePolicy(
            settings.embedding_failure_policy
        )
        self._transport = transport

    def _resolve_api_key(self) -> str:
        if self._api_key:
            return self._api_key
        if settings.hf_api_key is not None:
            key = settings.hf_api_key.get_secret_value()
            if key:
                return key
        raise ConfigurationError(
            "HF_API_KEY is required to embed queries. "
            "Create a token at https://huggingface.co/settings/tokens"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed(self, query: str) -> EmbeddingVector:
        """
        Embed a single query string.

        Returns
        -------
        EmbeddingVector
            Flat list of floats.

        Raises
        ------
        ConfigurationError
            If no credential is configured (raised before any network call).

        ProviderError
            If the request fails or the service answers with a non-success
            status; ``status_code`` carries the upstream status when known.
        """
        api_key = self._resolve_api_key()
        headers = {"Authorization": f"Bearer {api_key}"}

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    self.url,
                    json={"inputs": query},
                    headers=headers,
                )
            except httpx.HTTPError as exc:
                logger.error(
                    "Embedding request failed (%s): %s",
                    type(exc).__name__,
                    str(exc),
                )
                raise ProviderError(
                    f"Embedding request failed: {type(exc).__name__}",
                    provider="embedding",
                ) from exc

        if response.is_error:
            logger.error(
                "Embedding API error: status=%d body=%.200s",
                response.status_code,
                response.text,
            )
            raise ProviderError(
                f"Embedding API error: {response.status_code}",
                status_code=response.status_code,
                provider="embedding",
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(
                "Embedding response is not valid JSON.",
                status_code=response.status_code,
                provider="embedding",
            ) from exc

        result = parse_embedding_response(data)
        logger.debug(
            "Embedded query (%s response, dim=%d)",
            result.shape.value,
            len(result.vector),
        )
        return result.vector
