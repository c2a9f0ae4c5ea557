"""Unit tests for the embedding client."""

import asyncio

import numpy as np
import pytest

from conftest import FakeEmbeddingModel
from stylematch.core.embedding_client import EmbeddingClient
from stylematch.utils.exceptions import ParseError, UpstreamError, ValidationError


class BadEmbeddingModel(FakeEmbeddingModel):
    """Embedding model returning a fixed malformed payload."""

    def __init__(self, payload):
        super().__init__()
        self.payload = payload

    async def embed_text(self, text):
        self.calls.append(text)
        return self.payload


class TestEmbed:
    """Test single-text embedding."""

    def test_returns_float64_vector(self):
        """Test the model output becomes a 1-D float64 array."""
        client = EmbeddingClient(FakeEmbeddingModel({"hello": [1, 2, 3]}))
        vector = asyncio.run(client.embed("hello"))

        assert isinstance(vector, np.ndarray)
        assert vector.dtype == np.float64
        assert vector.tolist() == [1.0, 2.0, 3.0]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_rejected(self, text):
        """Test blank text is rejected before any model call."""
        model = FakeEmbeddingModel(default=[1.0])
        client = EmbeddingClient(model)

        with pytest.raises(ValidationError):
            asyncio.run(client.embed(text))
        assert model.calls == []

    @pytest.mark.parametrize("payload", [[], [[1.0, 2.0]], ["a", "b"]])
    def test_malformed_vector(self, payload):
        """Test empty, nested or non-numeric output raises ParseError."""
        client = EmbeddingClient(BadEmbeddingModel(payload))
        with pytest.raises(ParseError):
            asyncio.run(client.embed("hello"))

    def test_upstream_error_propagates(self):
        """Test transport failures surface unchanged."""
        client = EmbeddingClient(FakeEmbeddingModel(fail_on=["hello"]))
        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(client.embed("hello"))
        assert exc_info.value.status_code == 503

    def test_invalid_concurrency(self):
        """Test max_concurrency must be positive."""
        with pytest.raises(ValueError):
            EmbeddingClient(FakeEmbeddingModel(), max_concurrency=0)

    def test_model_name(self):
        """Test the client reports its model."""
        assert EmbeddingClient(FakeEmbeddingModel()).model_name == "fake-embedding"


class TestEmbedMany:
    """Test concurrent embedding of several texts."""

    def test_order_preserved(self):
        """Test results line up with the input order."""
        vectors = {"a": [1.0, 0.0], "b": [0.0, 1.0], "c": [1.0, 1.0]}
        client = EmbeddingClient(FakeEmbeddingModel(vectors))

        result = asyncio.run(client.embed_many(["c", "a", "b"]))

        assert [v.tolist() for v in result] == [[1.0, 1.0], [1.0, 0.0], [0.0, 1.0]]

    def test_duplicates_embedded_once(self):
        """Test identical texts cost one model call."""
        model = FakeEmbeddingModel(default=[1.0, 2.0])
        client = EmbeddingClient(model)

        result = asyncio.run(client.embed_many(["x", "y", "x", "x"]))

        assert len(result) == 4
        assert model.calls_for("x") == 1
        assert model.calls_for("y") == 1

    def test_concurrency_bound(self):
        """Test in-flight calls never exceed max_concurrency."""
        model = FakeEmbeddingModel(default=[1.0], delay=0.01)
        client = EmbeddingClient(model, max_concurrency=2)

        asyncio.run(client.embed_many([f"text {i}" for i in range(8)]))

        assert len(model.calls) == 8
        assert model.max_in_flight <= 2

    def test_failure_propagates(self):
        """Test one failing text fails the whole batch."""
        client = EmbeddingClient(FakeEmbeddingModel(default=[1.0], fail_on=["bad"]))
        with pytest.raises(UpstreamError):
            asyncio.run(client.embed_many(["ok", "bad", "also ok"]))

    def test_empty_input(self):
        """Test no texts gives no vectors."""
        client = EmbeddingClient(FakeEmbeddingModel())
        assert asyncio.run(client.embed_many([])) == []

    def test_reusable_across_event_loops(self):
        """Test one client works across separate asyncio.run calls."""
        client = EmbeddingClient(FakeEmbeddingModel(default=[1.0]), max_concurrency=1)
        for _ in range(3):
            assert len(asyncio.run(client.embed_many(["a", "b"]))) == 2
