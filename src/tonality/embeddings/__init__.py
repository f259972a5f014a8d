"""Embeddings client interfaces."""

from tonality.embeddings.client import EMBEDDING_MODES, EmbeddingsClient, create_embeddings_client
from tonality.embeddings.types import EmbeddingResult

__all__ = ["EMBEDDING_MODES", "EmbeddingsClient", "EmbeddingResult", "create_embeddings_client"]
