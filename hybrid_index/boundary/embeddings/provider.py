"""
Embedding provider boundary.

Single entry point for turning text into a vector. Any provider problem
(exception, timeout, wrong vector length) surfaces as ProviderError so
callers can decide whether to retry (worker) or degrade (search).

Dependencies: langchain_core, langchain_google_genai, hybrid_index.configs
System role: Embedding provider adapter
"""

import asyncio
import logging

from langchain_core.embeddings import Embeddings

from hybrid_index.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings
from hybrid_index.configs import get_settings
from hybrid_index.configs.embedding import EmbeddingSettings
from hybrid_index.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


class EmbeddingProvider:
    """
    Time-bounded embedding calls over a LangChain Embeddings model.

    The default Google client is created lazily on first use, so a missing
    API key is reported as a ProviderError at call time rather than when the
    provider is constructed.

    Attributes:
        model: Default embedding model ID
        dimensions: Expected vector length
        timeout_seconds: Per-call timeout
    """

    def __init__(
        self,
        embeddings: Embeddings | None = None,
        settings: EmbeddingSettings | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            embeddings: Embeddings implementation to call (default: Google,
                fixed dimensionality)
            settings: Embedding settings (default: application settings)
        """
        self.settings = settings or get_settings().embedding
        self.model = self.settings.model
        self.dimensions = self.settings.dimensions
        self.timeout_seconds = self.settings.timeout_seconds
        self._models: dict[str, Embeddings] = {}
        if embeddings is not None:
            self._models[self.model] = embeddings

    def _embeddings_for(self, model: str, dimensions: int) -> Embeddings:
        embeddings = self._models.get(model)
        if embeddings is None:
            kwargs = {}
            if self.settings.api_key:
                kwargs["google_api_key"] = self.settings.api_key
            embeddings = FixedDimensionEmbeddings(
                model=model,
                output_dimensionality=dimensions,
                **kwargs,
            )
            self._models[model] = embeddings
        return embeddings

    async def embed(
        self,
        text: str,
        model: str | None = None,
        dimensions: int | None = None,
        as_document: bool = False,
    ) -> list[float]:
        """
        Embed a single text.

        Args:
            text: Text to embed
            model: Override the default model
            dimensions: Expected vector length (default: configured dimensions)
            as_document: Embed as stored chunk content rather than a query

        Returns:
            list[float]: Vector of exactly ``dimensions`` floats

        Raises:
            ProviderError: On provider failure, timeout or length mismatch
        """
        model = model or self.model
        dimensions = dimensions or self.dimensions

        try:
            embeddings = self._embeddings_for(model, dimensions)
            if as_document:
                call = asyncio.to_thread(embeddings.embed_documents, [text])
            else:
                call = asyncio.to_thread(embeddings.embed_query, text)
            result = await asyncio.wait_for(call, timeout=self.timeout_seconds)
            vector = result[0] if as_document else result
        except asyncio.TimeoutError as e:
            logger.warning(
                f"{__name__}:embed - Provider timed out after {self.timeout_seconds}s "
                f"(model={model})"
            )
            raise ProviderError(
                f"Embedding provider timed out after {self.timeout_seconds}s",
                model=model,
            ) from e
        except Exception as e:
            logger.warning(f"{__name__}:embed - Provider call failed: {type(e).__name__}: {e}")
            raise ProviderError(f"Embedding provider call failed: {e}", model=model) from e

        if len(vector) != dimensions:
            raise ProviderError(
                f"Embedding has {len(vector)} dimensions, expected {dimensions}",
                model=model,
                details={"received": len(vector), "expected": dimensions},
            )
        return [float(value) for value in vector]
