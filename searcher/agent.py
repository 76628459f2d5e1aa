"""검색 에이전트 (DB + 인덱스 + LLM 조합)"""

import logging
import os
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Optional

from burmese import truncate_content

from .backend import ChromaBackend
from .config import AgentOptions
from .engine import SearchEngine
from .errors import (
    IndexNotReadyError,
    InputError,
    PostNotFoundError,
    RefreshInProgressError,
)
from .models import BackendHit, IndexReport, SearchHit, SearchOptions, SearchResponse, WordPressPost

if TYPE_CHECKING:
    from llm import LLMClient
    from wordpress import WordPressDatabase

logger = logging.getLogger(__name__)


class SearchAgent:
    """WordPress 검색 에이전트

    initialize()로 DB에 연결하고 인덱스를 구축한 뒤 search()를 호출한다.
    기본은 인메모리 SearchEngine, options.use_backend면 ChromaBackend를 쓴다.
    """

    def __init__(
        self,
        database: "WordPressDatabase",
        engine: Optional[SearchEngine] = None,
        backend: Optional[ChromaBackend] = None,
        llm: Optional["LLMClient"] = None,
        options: Optional[AgentOptions] = None,
        base_url: Optional[str] = None,
    ):
        self.options = options or AgentOptions()
        self.database = database
        self.llm = llm
        self.engine = engine or SearchEngine(
            llm=llm,
            batch_size=self.options.embedding_batch_size,
            content_length=self.options.index_content_length,
            snippet_length=self.options.snippet_length,
        )
        self.backend = backend if self.options.use_backend else None
        self.base_url = (base_url or os.getenv("WORDPRESS_BASE_URL") or "http://localhost").rstrip("/")

        self.is_initialized = False
        self._refresh_lock = Lock()

    @classmethod
    def from_env(cls, options: Optional[AgentOptions] = None, data_dir: Path = Path("data")) -> "SearchAgent":
        """환경변수로 협력 객체 생성 (API 키가 없으면 해당 기능 비활성)"""
        from llm import LLMClient
        from wordpress import WordPressDatabase

        from .embedder import VoyageEmbedder

        options = options or AgentOptions()

        embedder = None
        if os.getenv("VOYAGE_API_KEY"):
            embedder = VoyageEmbedder(batch_size=options.embedding_batch_size)
        else:
            logger.warning("VOYAGE_API_KEY가 없어 키워드 검색만 사용합니다")

        llm = None
        if os.getenv("GROQ_API_KEY"):
            llm = LLMClient()
        else:
            logger.warning("GROQ_API_KEY가 없어 쿼리 확장/요약을 사용하지 않습니다")

        engine = SearchEngine(
            embedder=embedder,
            llm=llm,
            batch_size=options.embedding_batch_size,
            content_length=options.index_content_length,
            snippet_length=options.snippet_length,
        )
        backend = None
        if options.use_backend:
            backend = ChromaBackend(data_dir=data_dir, embedder=embedder, batch_size=options.embedding_batch_size)

        return cls(WordPressDatabase(), engine=engine, backend=backend, llm=llm, options=options)

    def initialize(self) -> bool:
        """DB 연결 + (auto_index면) 인덱스 구축"""
        logger.info("검색 에이전트 초기화 중...")
        self.database.connect()

        if self.options.auto_index:
            self.build_index()

        self.is_initialized = True
        logger.info("검색 에이전트 초기화 완료")
        return True

    def build_index(self) -> IndexReport:
        """DB에서 문서를 읽어 인덱스 구축 (동시 호출 시 RefreshInProgressError)"""
        if not self._refresh_lock.acquire(blocking=False):
            raise RefreshInProgressError("이미 인덱싱이 진행 중입니다")
        try:
            limit = self.options.max_index_size
            if self.backend is not None:
                return self.backend.build(self.database.fetch_all_tables(limit))

            posts = self.database.fetch_documents(limit)
            return self.engine.index_content(posts)
        finally:
            self._refresh_lock.release()

    def refresh_index(self) -> IndexReport:
        logger.info("인덱스 갱신 중...")
        return self.build_index()

    def search(
        self,
        query: str,
        limit: int = 10,
        offset: int = 0,
        tables: Optional[list[str]] = None,
        enhance_query: Optional[bool] = None,
    ) -> SearchResponse:
        """검색

        Args:
            query: 검색어 (빈 문자열이면 InputError)
            limit: 최대 결과 수
            offset: 건너뛸 결과 수
            tables: 백엔드 사용 시 검색할 테이블
            enhance_query: LLM 쿼리 확장 여부 (기본: options 값)

        Returns:
            검색 응답
        """
        if not query or not query.strip():
            raise InputError("검색어가 비어 있습니다")
        if not self.is_initialized:
            raise IndexNotReadyError("에이전트가 초기화되지 않았습니다. initialize()를 먼저 호출하세요")

        if enhance_query is None:
            enhance_query = self.options.enable_query_enhancement

        logger.info(f"검색: {query!r}")
        if self.backend is not None:
            backend_hits = self.backend.query(query, tables=tables, limit=limit, offset=offset)
            hits = [self._backend_hit_to_search_hit(hit) for hit in backend_hits]
        else:
            options = SearchOptions(
                limit=limit + offset,
                semantic_threshold=self.options.similarity_threshold,
                enhance_query=enhance_query,
            )
            hits = self.engine.hybrid_search(query, options)[offset:]
            for hit in hits:
                document = self.engine.index.get(hit.id)
                if document and document.post:
                    self._decorate(hit, document.post)

        logger.info(f"검색 결과 {len(hits)}개")
        return SearchResponse(query=query, total=len(hits), results=hits)

    def _decorate(self, hit: SearchHit, post: WordPressPost):
        """URL과 (긴 본문이면) 요약 추가"""
        hit.url = self.post_url(post)
        if self.options.enable_summarization and len(post.content) > self.options.summary_min_length:
            hit.summary = self.summarize(post.content, hit.id)

    def _backend_hit_to_search_hit(self, hit: BackendHit) -> SearchHit:
        data = hit.data
        title = str(data.get("title") or data.get("term_name") or "")
        content = str(
            data.get("content") or data.get("meta_value") or data.get("description") or ""
        )
        search_hit = SearchHit(
            id=hit.id,
            title=title,
            type=str(data.get("post_type") or hit.table),
            date=data.get("post_date") if hit.table == "posts" else None,
            highlighted_title=hit.highlights.get("title", [title])[0],
            highlighted_content=hit.highlights.get("content", [truncate_content(content)])[0],
            semantic_score=hit.score,
            combined_score=hit.score,
        )
        if hit.table == "posts" and "ID" in data:
            post = WordPressPost(
                id=data["ID"],
                title=title,
                content=content,
                type=str(data.get("post_type") or "post"),
                slug=str(data.get("post_name") or ""),
            )
            self._decorate(search_hit, post)
        return search_hit

    def summarize(self, content: str, post_id=None) -> str:
        """본문 요약 (LLM 실패 시 잘라내기)"""
        max_length = self.options.summary_max_length
        if self.llm is None:
            return truncate_content(content, max_length)
        try:
            return self.llm.summarize(content, max_length)
        except Exception as e:
            logger.warning(f"게시물 {post_id} 요약 실패, 잘라내기 사용: {e}")
            return truncate_content(content, max_length)

    def post_url(self, post: WordPressPost) -> str:
        """게시물 URL (slug 없으면 ?page_id= / ?p=)"""
        if post.slug:
            return f"{self.base_url}/{post.slug}"
        if post.type == "page":
            return f"{self.base_url}/?page_id={post.id}"
        return f"{self.base_url}/?p={post.id}"

    def get_related_posts(self, post_id: int, limit: int = 5) -> list[SearchHit]:
        """제목 + 요약으로 검색한 관련 게시물 (자기 자신 제외)"""
        post = self.database.get_post_by_id(post_id)
        if post is None:
            raise PostNotFoundError(f"게시물을 찾을 수 없습니다: {post_id}")

        response = self.search(f"{post.title} {post.excerpt}", limit=limit + 1, enhance_query=False)
        related = [hit for hit in response.results if hit.id != post_id]
        return related[:limit]

    def suggest_search_terms(self, partial: str, limit: int = 5) -> list[str]:
        """검색어 자동 완성 제안 (2글자 미만이면 빈 목록)"""
        partial = partial.strip()
        if len(partial) < 2:
            return []
        if self.llm is None:
            return [partial]

        try:
            return self.llm.expand_query(partial)[:limit]
        except Exception as e:
            logger.warning(f"검색어 제안 실패: {e}")
            return [partial]

    def get_stats(self) -> dict:
        stats = {
            "initialized": self.is_initialized,
            "options": self.options.model_dump(),
        }
        if self.backend is not None:
            stats["available_tables"] = self.backend.available_tables()
        else:
            stats["index"] = self.engine.get_index_stats()
        return stats

    def close(self):
        """DB/클라이언트 정리"""
        self.database.close()
        if self.engine.embedder is not None:
            self.engine.embedder.close()
        if self.backend is not None:
            self.backend.close()
        self.is_initialized = False
        logger.info("검색 에이전트 종료")

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
