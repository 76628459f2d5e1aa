"""공용 테스트 픽스처 (외부 API 없이 동작하는 가짜 협력 객체)"""

from datetime import datetime
from typing import Callable, Optional

import pytest

from searcher import DependencyUnavailableError, WordPressPost

# 가짜 임베딩 차원 = 키워드 수 + 1 (영벡터 방지용 상수 성분)
KEYWORDS = ["မြန်မာ", "ရန်ကုန်", "သတင်း", "ခရီး", "python"]


def keyword_vector(text: str) -> list[float]:
    lowered = text.lower()
    return [1.0 if keyword in lowered else 0.0 for keyword in KEYWORDS] + [0.1]


class FakeEmbedder:
    """키워드 포함 여부로 벡터를 만드는 임베더

    fail_marker가 포함된 텍스트가 있는 배치는 실패한다.
    """

    def __init__(
        self,
        fail_marker: Optional[str] = None,
        query_dimension: Optional[int] = None,
        on_batch: Optional[Callable[[list[str]], None]] = None,
    ):
        self.fail_marker = fail_marker
        self.query_dimension = query_dimension
        self.on_batch = on_batch
        self.batches: list[list[str]] = []
        self.closed = False

    def embed_batch(self, texts: list[str], input_type: str = "document") -> list[list[float]]:
        self.batches.append(list(texts))
        if self.on_batch:
            self.on_batch(texts)
        if self.fail_marker and any(self.fail_marker in t for t in texts):
            raise DependencyUnavailableError("embedding", "fake failure")
        return [keyword_vector(t) for t in texts]

    def embed_single(self, text: str, input_type: str = "document") -> list[float]:
        return self.embed_batch([text], input_type)[0]

    def embed_query(self, text: str) -> list[float]:
        vector = keyword_vector(text)
        if self.query_dimension is not None:
            return [1.0] * self.query_dimension
        return vector

    def close(self):
        self.closed = True


class FakeLLM:
    """고정 응답 LLM (raise_* 플래그로 실패 흉내)"""

    def __init__(
        self,
        expansions: Optional[list[str]] = None,
        summary: str = "요약",
        raise_on_expand: bool = False,
        raise_on_summarize: bool = False,
    ):
        self.expansions = expansions
        self.summary = summary
        self.raise_on_expand = raise_on_expand
        self.raise_on_summarize = raise_on_summarize
        self.expand_calls: list[str] = []

    def expand_query(self, query: str, language: str = "burmese") -> list[str]:
        self.expand_calls.append(query)
        if self.raise_on_expand:
            raise RuntimeError("expansion provider down")
        return self.expansions if self.expansions is not None else [query]

    def summarize(self, content: str, max_length: int = 150) -> str:
        if self.raise_on_summarize:
            raise DependencyUnavailableError("llm", "fake failure")
        return self.summary


class FakeDatabase:
    """메모리상의 게시물 목록을 돌려주는 문서 소스"""

    def __init__(self, posts: list[WordPressPost], fail_connect: bool = False):
        self.posts = posts
        self.fail_connect = fail_connect
        self.connected = False

    def connect(self):
        if self.fail_connect:
            raise DependencyUnavailableError("database", "connection refused")
        self.connected = True

    def close(self):
        self.connected = False

    def fetch_documents(self, limit: int = 10) -> list[WordPressPost]:
        return self.posts[:limit]

    def get_post_by_id(self, post_id: int) -> Optional[WordPressPost]:
        return next((p for p in self.posts if p.id == post_id), None)

    def fetch_all_tables(self, limit: int = 1000) -> dict[str, list[dict]]:
        return {
            "posts": [
                {
                    "ID": p.id,
                    "post_title": p.title,
                    "post_content": p.content,
                    "post_excerpt": p.excerpt,
                    "post_type": p.type,
                    "post_name": p.slug,
                }
                for p in self.posts[:limit]
            ]
        }


LONG_CONTENT = "မြန်မာ သတင်း အကြောင်း " * 30


@pytest.fixture
def sample_posts() -> list[WordPressPost]:
    return [
        WordPressPost(
            id=1,
            title="မြန်မာနိုင်ငံ သတင်း",
            content=LONG_CONTENT,
            excerpt="နောက်ဆုံးရ သတင်း",
            date=datetime(2024, 3, 1),
            slug="myanmar-news",
        ),
        WordPressPost(
            id=2,
            title="ရန်ကုန်မြို့ ခရီးသွား",
            content="ရန်ကုန် ခရီးစဉ် လမ်းညွှန်",
            date=datetime(2024, 2, 1),
        ),
        WordPressPost(
            id=3,
            title="Python programming guide",
            content="Learn Python step by step",
            type="page",
            date=datetime(2024, 1, 1),
        ),
    ]


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def fake_database(sample_posts) -> FakeDatabase:
    return FakeDatabase(sample_posts)
