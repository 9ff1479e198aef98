"""
Deterministic stand-ins for the embedding and completion providers.
"""

import re
import threading
import zlib
from typing import Optional

import numpy as np

DIMENSIONS = 64
TOKEN_PATTERN = re.compile(r"[a-z0-9]+")


def bag_of_words_vector(text: str, dimensions: int = DIMENSIONS) -> list[float]:
    """
    Hash tokens into buckets.

    A small constant bias keeps every vector non-zero, so texts without
    shared words still have a positive (low) similarity.
    """
    vector = np.full(dimensions, 0.05)
    for token in TOKEN_PATTERN.findall(text.lower()):
        vector[zlib.crc32(token.encode("utf-8")) % dimensions] += 1.0
    return vector.tolist()


class FakeAPIError(Exception):
    """Mimics the attributes SDK exceptions expose."""

    def __init__(
        self,
        message: str = "provider error",
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        body: Optional[dict] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.body = body


class FakeEmbeddingProvider:
    """Thread-safe embedding provider that records every call."""

    def __init__(self, fail_with: Optional[Exception] = None, dimensions: int = DIMENSIONS):
        self.fail_with = fail_with
        self.dimensions = dimensions
        self.calls: list[str] = []
        self.closed = False
        self._lock = threading.Lock()

    def embed(self, text: str) -> list[float]:
        with self._lock:
            self.calls.append(text)
        if self.fail_with is not None:
            raise self.fail_with
        return bag_of_words_vector(text, self.dimensions)

    def close(self) -> None:
        self.closed = True


class FakeCompletionProvider:
    """Completion provider returning a canned response."""

    def __init__(self, response: str = "", fail_with: Optional[Exception] = None):
        self.response = response
        self.fail_with = fail_with
        self.prompts: list[tuple[str, str]] = []
        self.closed = False

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append((system_prompt, user_prompt))
        if self.fail_with is not None:
            raise self.fail_with
        return self.response

    def close(self) -> None:
        self.closed = True
