"""Unit tests for cosine similarity."""

import numpy as np
import pytest

from stylematch.core.scoring.similarity import batch_cosine_similarity, cosine_similarity


class TestCosineSimilarity:
    """Test pairwise cosine similarity."""

    def test_self_similarity_is_one(self):
        """Test a vector is maximally similar to itself."""
        rng = np.random.default_rng(7)
        for _ in range(5):
            vec = rng.normal(size=64)
            assert cosine_similarity(vec, vec) == pytest.approx(1.0, abs=1e-6)

    def test_symmetry(self):
        """Test cos(a, b) == cos(b, a)."""
        rng = np.random.default_rng(11)
        a = rng.normal(size=32)
        b = rng.normal(size=32)
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_orthogonal_and_opposite(self):
        """Test orthogonal vectors score 0 and opposite vectors -1."""
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_zero_vector_scores_zero(self):
        """Test zero vectors score 0 instead of dividing by zero."""
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0
        assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0

    def test_scale_invariance(self):
        """Test magnitude does not affect the score."""
        assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)

    def test_dimension_mismatch_raises(self):
        """Test vectors of different length are rejected."""
        with pytest.raises(ValueError, match="dimensions must match"):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])

    def test_accepts_lists_and_arrays(self):
        """Test list and float32 array inputs are both accepted."""
        score = cosine_similarity([0.6, 0.8], np.array([0.6, 0.8], dtype=np.float32))
        assert isinstance(score, float)
        assert score == pytest.approx(1.0, abs=1e-6)


class TestBatchCosineSimilarity:
    """Test query-vs-matrix similarity."""

    def test_matches_pairwise(self):
        """Test batch scores equal pairwise scores."""
        query = [1.0, 0.0]
        candidates = [[1.0, 0.0], [0.0, 1.0], [0.9, 0.1]]
        scores = batch_cosine_similarity(query, candidates)

        assert scores.shape == (3,)
        for score, candidate in zip(scores, candidates):
            assert score == pytest.approx(cosine_similarity(query, candidate))

    def test_zero_rows_and_zero_query(self):
        """Test zero rows, and a zero query, score exactly 0."""
        scores = batch_cosine_similarity([1.0, 0.0], [[0.0, 0.0], [1.0, 0.0]])
        assert scores[0] == 0.0
        assert scores[1] == pytest.approx(1.0)

        assert np.all(batch_cosine_similarity([0.0, 0.0], [[1.0, 0.0], [0.0, 1.0]]) == 0.0)

    def test_empty_candidates(self):
        """Test no candidates gives an empty score array."""
        assert batch_cosine_similarity([1.0, 0.0], []).shape == (0,)

    def test_dimension_mismatch_raises(self):
        """Test candidate rows must match the query length."""
        with pytest.raises(ValueError):
            batch_cosine_similarity([1.0, 0.0], [[1.0, 0.0, 0.0]])
