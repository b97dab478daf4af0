"""
Cosine similarity for exhaustive vector search.

Dependencies: numpy
System role: Scoring functions for VectorStore.vector_search
"""

import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors.

    Vectors of different length and zero-magnitude vectors score 0 instead
    of raising; both cases are logged as warnings.

    Args:
        a: First vector
        b: Second vector

    Returns:
        float: Similarity in [-1.0, 1.0]
    """
    a_vec = np.asarray(a, dtype=np.float64)
    b_vec = np.asarray(b, dtype=np.float64)
    if a_vec.shape != b_vec.shape:
        logger.warning(
            "Vector dimensions do not match",
            extra={"a_length": a_vec.size, "b_length": b_vec.size},
        )
        return 0.0

    norm_a = np.linalg.norm(a_vec)
    norm_b = np.linalg.norm(b_vec)
    if norm_a == 0 or norm_b == 0:
        logger.warning("Zero-magnitude vector in similarity", extra={"length": a_vec.size})
        return 0.0

    score = float(np.dot(a_vec, b_vec) / (norm_a * norm_b))
    return max(-1.0, min(1.0, score))


def cosine_scores(query: Sequence[float], vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Score many stored vectors against one query in a single matrix product.

    Rows whose length differs from the query, and zero-magnitude rows, score
    0 with a warning. A zero query scores every row 0.

    Args:
        query: Query vector
        vectors: Stored vectors, any lengths

    Returns:
        np.ndarray: One score per row of vectors, in input order
    """
    scores = np.zeros(len(vectors), dtype=np.float64)
    query_vec = np.asarray(query, dtype=np.float64)

    query_norm = np.linalg.norm(query_vec)
    if query_norm == 0:
        logger.warning("Zero-magnitude query vector", extra={"length": query_vec.size})
        return scores

    matching = [i for i, vector in enumerate(vectors) if len(vector) == query_vec.size]
    if len(matching) < len(vectors):
        logger.warning(
            "Vector dimensions do not match",
            extra={
                "query_length": query_vec.size,
                "mismatched_count": len(vectors) - len(matching),
            },
        )
    if not matching:
        return scores

    matrix = np.array([vectors[i] for i in matching], dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1)
    nonzero = norms > 0
    if not nonzero.all():
        logger.warning(
            "Zero-magnitude stored vectors in similarity",
            extra={"zero_count": int((~nonzero).sum())},
        )

    rows = np.asarray(matching)[nonzero]
    scores[rows] = (matrix[nonzero] @ query_vec) / (norms[nonzero] * query_norm)
    return np.clip(scores, -1.0, 1.0)


def rank_scores(scores: np.ndarray, top_k: int) -> np.ndarray:
    """
    Indices of the top_k highest scores, ties kept in input order.

    Args:
        scores: One score per candidate
        top_k: Maximum number of indices

    Returns:
        np.ndarray: Candidate indices, highest score first
    """
    return np.argsort(-scores, kind="stable")[:top_k]
