"""
Unit tests for the Voyage embedding client and cosine similarity.
"""

import json

import httpx
import pytest

from searcher import DependencyUnavailableError, DimensionMismatchError, VoyageEmbedder, cosine_similarity


def make_embedder(handler, **kwargs) -> VoyageEmbedder:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return VoyageEmbedder(api_key="test-key", client=client, **kwargs)


class TestCosineSimilarity:
    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])

    def test_dimension_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0], [1.0, 0.0])

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


class TestVoyageEmbedder:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("VOYAGE_API_KEY", raising=False)
        with pytest.raises(ValueError):
            VoyageEmbedder()

    def test_embed_batch_orders_by_index(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(json.loads(request.content))
            return httpx.Response(
                200,
                json={
                    "data": [
                        {"index": 1, "embedding": [0.0, 1.0]},
                        {"index": 0, "embedding": [1.0, 0.0]},
                    ]
                },
            )

        embedder = make_embedder(handler)
        embeddings = embedder.embed_batch(["a", "b"])

        assert embeddings == [[1.0, 0.0], [0.0, 1.0]]
        assert requests[0]["input"] == ["a", "b"]
        assert requests[0]["input_type"] == "document"
        assert requests[0]["model"] == VoyageEmbedder.DEFAULT_MODEL

    def test_embed_query_uses_query_input_type(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(json.loads(request.content))
            assert request.headers["Authorization"] == "Bearer test-key"
            return httpx.Response(200, json={"data": [{"index": 0, "embedding": [0.5]}]})

        assert make_embedder(handler).embed_query("မြန်မာ") == [0.5]
        assert seen["input_type"] == "query"

    def test_empty_batch_skips_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert make_embedder(handler).embed_batch([]) == []

    def test_http_error_wrapped(self):
        embedder = make_embedder(lambda request: httpx.Response(500, json={"detail": "boom"}))
        with pytest.raises(DependencyUnavailableError) as exc_info:
            embedder.embed_batch(["a"])
        assert exc_info.value.service == "embedding"

    def test_malformed_response_wrapped(self):
        embedder = make_embedder(lambda request: httpx.Response(200, json={"unexpected": []}))
        with pytest.raises(DependencyUnavailableError):
            embedder.embed_batch(["a"])

    def test_missing_embedding_rejected(self):
        embedder = make_embedder(
            lambda request: httpx.Response(200, json={"data": [{"index": 0, "embedding": [1.0]}]})
        )
        with pytest.raises(DependencyUnavailableError):
            embedder.embed_batch(["a", "b"])

