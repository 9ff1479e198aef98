"""
Embedding providers and the per-run embedding orchestrator.

Providers turn one text into one fixed-length vector. The orchestrator fans
requests out over a bounded thread pool, embeds each distinct text once per
run, and classifies provider failures into the error taxonomy. Nothing is
retried here; retries belong to the provider client.
"""

import logging
import os
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from .config import DEFAULT_EMBEDDING_MODEL, DEFAULT_LOCAL_EMBEDDING_MODEL
from .errors import ProviderAuthError, ProviderUnavailableError, classify_provider_error

logger = logging.getLogger(__name__)

# text-embedding-3-small accepts ~8k tokens; keep well under that
MAX_EMBEDDING_CHARS = 30000


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Anything that maps a text to a fixed-length real vector."""

    def embed(self, text: str) -> Sequence[float]:
        ...


class OpenAIEmbeddingProvider:
    """
    Embedding provider backed by the OpenAI embeddings API.

    The client is constructed per provider instance and owned by the caller;
    use it as a context manager (or call close()) so the underlying HTTP
    client does not outlive the analysis run.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_EMBEDDING_MODEL,
        timeout: float = 60.0,
    ):
        """
        Initialize the provider.

        Args:
            api_key: OpenAI API key. If None, reads OPENAI_API_KEY.
            model: Embedding model identifier.
            timeout: Per-request timeout in seconds.
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model

        if not self.api_key:
            raise ProviderAuthError(
                "No API key provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        from openai import OpenAI

        # Retries are the caller's concern, not the analyzer's
        self.client = OpenAI(api_key=self.api_key, timeout=timeout, max_retries=0)

    def embed(self, text: str) -> list[float]:
        response = self.client.embeddings.create(
            model=self.model,
            input=text[:MAX_EMBEDDING_CHARS],
        )
        if not response.data:
            raise ProviderUnavailableError("Embedding response contained no data")
        return list(response.data[0].embedding)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "OpenAIEmbeddingProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class SentenceTransformerProvider:
    """
    Local embedding provider using sentence-transformers.

    No API key needed; the model is downloaded and loaded on first use.
    """

    def __init__(self, model_name: str = DEFAULT_LOCAL_EMBEDDING_MODEL):
        self._model_name = model_name
        self._model = None

    @property
    def model(self):
        """Lazy-load the embedding model."""
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            self._model = SentenceTransformer(self._model_name)
            logger.info(f"Loaded embedding model: {self._model_name}")
        return self._model

    def embed(self, text: str) -> list[float]:
        return self.model.encode(text, convert_to_numpy=True).tolist()

    def close(self) -> None:
        self._model = None

    def __enter__(self) -> "SentenceTransformerProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def create_embedding_provider(
    name: str = "openai",
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> EmbeddingProvider:
    """
    Factory function to create an embedding provider.

    Args:
        name: "openai" or "local" (sentence-transformers).
        api_key: Optional API key for remote providers.
        model: Optional model override.

    Returns:
        Configured provider instance.
    """
    if name == "openai":
        return OpenAIEmbeddingProvider(api_key=api_key, model=model or DEFAULT_EMBEDDING_MODEL)
    if name == "local":
        return SentenceTransformerProvider(model_name=model or DEFAULT_LOCAL_EMBEDDING_MODEL)
    raise ValueError(f"Unknown embedding provider: {name}. Expected 'openai' or 'local'.")


class EmbeddingOrchestrator:
    """
    Fans embedding requests out over a bounded worker pool for one run.

    Each distinct text is embedded at most once per orchestrator, so a
    section compared against many keywords costs a single provider call.
    Any provider failure fails the whole batch (all-or-nothing).

    Usage:
        with EmbeddingOrchestrator(provider, max_concurrency=8) as orchestrator:
            vectors = orchestrator.embed_many(texts)
    """

    def __init__(self, provider: EmbeddingProvider, max_concurrency: int = 8):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.provider = provider
        self.max_concurrency = max_concurrency
        self.request_count = 0
        self._cache: dict[str, np.ndarray] = {}
        self._dimension: Optional[int] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self) -> "EmbeddingOrchestrator":
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_concurrency,
            thread_name_prefix="embed",
        )
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Shut the worker pool down and drop cached vectors."""
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
        self._cache.clear()

    def _validate(self, text: str, vector: Sequence[float]) -> np.ndarray:
        arr = np.asarray(vector, dtype=np.float64)
        if arr.ndim != 1 or arr.size == 0:
            raise ProviderUnavailableError(
                f"Malformed embedding for text of {len(text)} chars: shape {arr.shape}"
            )
        if not np.isfinite(arr).all():
            raise ProviderUnavailableError(
                f"Embedding for text of {len(text)} chars contains NaN or infinite values"
            )
        if self._dimension is None:
            self._dimension = arr.size
        elif arr.size != self._dimension:
            raise ProviderUnavailableError(
                f"Embedding dimension mismatch: expected {self._dimension}, got {arr.size}"
            )
        return arr

    def _call_provider(self, text: str) -> Sequence[float]:
        return self.provider.embed(text)

    def embed(self, text: str) -> np.ndarray:
        """Embed a single text (cached)."""
        return self.embed_many([text])[0]

    def embed_many(self, texts: Sequence[str]) -> list[np.ndarray]:
        """
        Embed texts concurrently, returning vectors in input order.

        Args:
            texts: Texts to embed; duplicates are requested once.

        Returns:
            One vector per input text.

        Raises:
            AnalysisError subclass: the first provider failure, classified.
        """
        pending = [t for t in dict.fromkeys(texts) if t not in self._cache]

        if pending:
            if self._executor is None:
                raise RuntimeError("EmbeddingOrchestrator must be used as a context manager")

            futures: dict[Future, str] = {
                self._executor.submit(self._call_provider, text): text for text in pending
            }
            self.request_count += len(futures)
            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

            for future in done:
                error = future.exception()
                if error is not None:
                    for other in not_done:
                        other.cancel()
                    wait(not_done)
                    classified = classify_provider_error(error, "Embedding request")
                    if classified is error:
                        raise classified
                    raise classified from error

            for future, text in futures.items():
                self._cache[text] = self._validate(text, future.result())

            logger.debug(f"Embedded {len(pending)} texts ({self.request_count} requests this run)")

        return [self._cache[text] for text in texts]
