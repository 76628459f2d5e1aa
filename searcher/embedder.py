"""Voyage AI 임베딩 생성"""

import os
from typing import Optional, Sequence

import httpx
import numpy as np

from .errors import DependencyUnavailableError, DimensionMismatchError


def cosine_similarity(vector1: Sequence[float], vector2: Sequence[float]) -> float:
    """코사인 유사도 [-1, 1]

    차원이 다르면 DimensionMismatchError (잘라서 비교하지 않음).
    영벡터가 있으면 0.
    """
    if len(vector1) != len(vector2):
        raise DimensionMismatchError(len(vector1), len(vector2))

    v1 = np.asarray(vector1, dtype=float)
    v2 = np.asarray(vector2, dtype=float)
    norm = np.linalg.norm(v1) * np.linalg.norm(v2)
    if norm == 0:
        return 0.0
    return float(np.dot(v1, v2) / norm)


class VoyageEmbedder:
    """Voyage AI 임베딩 클라이언트"""

    BASE_URL = "https://api.voyageai.com/v1/embeddings"
    DEFAULT_MODEL = "voyage-3-lite"  # 빠르고 저렴, 다국어 지원

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        batch_size: int = 5,  # 긴 게시물 기준 요청당 토큰 한도
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or os.getenv("VOYAGE_API_KEY")
        if not self.api_key:
            raise ValueError("VOYAGE_API_KEY 환경변수가 필요합니다")

        self.model = model
        self.batch_size = batch_size
        self._client = client or httpx.Client(timeout=60.0)

    def embed_single(self, text: str, input_type: str = "document") -> list[float]:
        """단일 텍스트 임베딩"""
        result = self.embed_batch([text], input_type=input_type)
        return result[0]

    def embed_query(self, text: str) -> list[float]:
        """검색 쿼리 임베딩 (input_type=query)"""
        return self.embed_single(text, input_type="query")

    def embed_batch(self, texts: list[str], input_type: str = "document") -> list[list[float]]:
        """배치 임베딩 (호출자가 batch_size 이내로 나눠서 호출)"""
        if not texts:
            return []

        try:
            response = self._client.post(
                self.BASE_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "input": texts,
                    "input_type": input_type,
                },
            )
            response.raise_for_status()
            items = response.json()["data"]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            raise DependencyUnavailableError("embedding", str(e)) from e

        # 결과를 인덱스 순서대로 정렬
        embeddings: list = [None] * len(texts)
        for item in items:
            embeddings[item["index"]] = item["embedding"]

        if any(e is None for e in embeddings):
            raise DependencyUnavailableError("embedding", "응답에 누락된 임베딩이 있습니다")
        return embeddings

    def close(self):
        """클라이언트 종료"""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
