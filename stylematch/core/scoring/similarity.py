"""
Cosine similarity between text embeddings.

Vectors are compared as float64. A zero-norm vector has no direction, so
any comparison involving one scores 0 instead of producing NaN.

Example:
    >>> from stylematch.core.scoring.similarity import cosine_similarity
    >>> round(cosine_similarity([1.0, 0.0], [0.9, 0.1]), 4)
    0.9939
"""

from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

VectorLike = Union[np.ndarray, List[float], Sequence[float]]


def as_vector(vec: VectorLike) -> np.ndarray:
    """Convert a vector-like to a 1-D float64 array."""
    arr = np.asarray(vec, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Expected a 1-D vector, got shape {arr.shape}")
    return arr


def _unit_rows(matrix: np.ndarray) -> np.ndarray:
    """Scale each row to unit length; zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=-1, keepdims=True)
    return np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms > 0)


def cosine_similarity(vec_a: VectorLike, vec_b: VectorLike) -> float:
    """
    Cosine of the angle between two vectors, in [-1, 1].

    Symmetric in its arguments; a vector scores 1.0 against itself.

    Raises:
        ValueError: If the vectors differ in length.
    """
    a = as_vector(vec_a)
    b = as_vector(vec_b)
    if a.shape != b.shape:
        raise ValueError(f"Vector dimensions must match: {a.shape} vs {b.shape}")

    score = float(np.dot(_unit_rows(a), _unit_rows(b)))
    return min(1.0, max(-1.0, score))


def batch_cosine_similarity(
    query: VectorLike,
    candidates: Union[np.ndarray, Sequence[VectorLike]],
) -> np.ndarray:
    """
    Score one query against every row of a candidate matrix.

    Args:
        query: Vector of shape (dim,).
        candidates: Matrix of shape (n, dim), one candidate per row.

    Returns:
        float64 array of shape (n,), in candidate order.

    Raises:
        ValueError: If candidate rows do not match the query length.
    """
    q = as_vector(query)
    matrix = np.asarray(candidates, dtype=np.float64)

    if matrix.size == 0:
        return np.zeros(0, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[1] != q.shape[0]:
        raise ValueError(f"Candidate matrix shape {matrix.shape} does not match query dimension {q.shape[0]}")

    scores = _unit_rows(matrix) @ _unit_rows(q)
    return np.clip(scores, -1.0, 1.0)
