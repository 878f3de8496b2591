"""
Google Generative AI embeddings sized for the chunks table.

Chunk text and search queries are embedded with the matching retrieval
task types (RETRIEVAL_DOCUMENT / RETRIEVAL_QUERY) at one fixed output
size, since chunks.embedding is a fixed-width vector column. The base
class ignores output_dimensionality given to its constructor, so it is
passed on every call here.

Dependencies: langchain_google_genai, python-dotenv
System role: Default embedding model behind EmbeddingProvider
"""

import logging

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)

# GOOGLE_API_KEY is read from the process environment by the client
load_dotenv()

DOCUMENT_TASK_TYPE = "RETRIEVAL_DOCUMENT"
QUERY_TASK_TYPE = "RETRIEVAL_QUERY"


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    Retrieval embeddings with a fixed vector size.

    Explicit task_type or output_dimensionality arguments still win over
    the defaults.
    """

    _output_dimensionality: int = 512

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 512,
        **kwargs,
    ) -> None:
        """
        Args:
            model: Google embedding model ID
            output_dimensionality: Vector size of every embedding
            **kwargs: Passed to GoogleGenerativeAIEmbeddings (google_api_key, ...)
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - model={model}, output_dimensionality={output_dimensionality}"
        )

    def embed_documents(
        self,
        texts: list[str],
        *,
        task_type: str | None = None,
        output_dimensionality: int | None = None,
        **kwargs,
    ) -> list[list[float]]:
        """Embed chunk texts as retrieval documents."""
        return super().embed_documents(
            texts,
            task_type=task_type or DOCUMENT_TASK_TYPE,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
            **kwargs,
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        output_dimensionality: int | None = None,
        **kwargs,
    ) -> list[float]:
        """Embed a search query."""
        return super().embed_query(
            text,
            task_type=task_type or QUERY_TASK_TYPE,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
            **kwargs,
        )
