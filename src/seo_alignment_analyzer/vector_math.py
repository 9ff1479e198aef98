"""
Vector math for embedding comparison.

Pure numpy functions: cosine similarity, L2 normalization and the
weighted keyword centroid. Zero-magnitude vectors are a hard error
(DegenerateMathError), never a silent 0 or NaN.
"""

from typing import Iterable, Sequence, Union

import numpy as np

from .errors import DegenerateMathError

Vector = Union[Sequence[float], np.ndarray]


def _as_array(vector: Vector) -> np.ndarray:
    return np.asarray(vector, dtype=np.float64)


def normalize(vector: Vector) -> np.ndarray:
    """
    Scale a vector to unit length.

    Raises:
        DegenerateMathError: If the vector has zero magnitude.
    """
    arr = _as_array(vector)
    norm = np.linalg.norm(arr)
    if norm == 0 or not np.isfinite(norm):
        raise DegenerateMathError("Cannot normalize a zero-magnitude vector")
    return arr / norm


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    Compute cosine similarity between two vectors of equal length.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        dot(a, b) / (|a| * |b|), nominally in [-1, 1].

    Raises:
        ValueError: If the vectors differ in length.
        DegenerateMathError: If either vector has zero or non-finite magnitude.
    """
    arr_a = _as_array(a)
    arr_b = _as_array(b)
    if arr_a.shape != arr_b.shape:
        raise ValueError(
            f"Vector length mismatch: {arr_a.shape[0]} vs {arr_b.shape[0]}"
        )
    norm_a = np.linalg.norm(arr_a)
    norm_b = np.linalg.norm(arr_b)
    if norm_a == 0 or norm_b == 0:
        raise DegenerateMathError("Cosine similarity undefined for a zero-magnitude vector")
    if not (np.isfinite(norm_a) and np.isfinite(norm_b)):
        raise DegenerateMathError("Cosine similarity undefined for a non-finite vector")
    similarity = float(np.dot(arr_a, arr_b) / (norm_a * norm_b))
    if not np.isfinite(similarity):
        raise DegenerateMathError(f"Cosine similarity is not finite: {similarity}")
    return similarity


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def weighted_centroid(entries: Iterable[tuple[Vector, float]]) -> np.ndarray:
    """
    Compute the unit-length weighted mean direction of embeddings.

    Accumulates sum(embedding_i * weight_i) and L2-normalizes the result.
    A weight of zero contributes nothing but is not an error.

    Args:
        entries: (embedding, weight) pairs.

    Returns:
        Unit vector representing the combined semantic target.

    Raises:
        ValueError: If there are no entries or embedding lengths differ.
        DegenerateMathError: If no entry has positive weight or the weighted
            sum has zero magnitude.
    """
    total: np.ndarray = None  # type: ignore[assignment]
    has_positive_weight = False

    for embedding, weight in entries:
        arr = _as_array(embedding)
        if total is None:
            total = np.zeros_like(arr)
        elif arr.shape != total.shape:
            raise ValueError(
                f"Embedding length mismatch: {arr.shape[0]} vs {total.shape[0]}"
            )
        if weight > 0:
            has_positive_weight = True
        total += arr * weight

    if total is None:
        raise ValueError("weighted_centroid requires at least one embedding")
    if not has_positive_weight:
        raise DegenerateMathError("All keyword weights are zero; centroid is undefined")

    return normalize(total)
