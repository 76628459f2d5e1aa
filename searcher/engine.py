"""인메모리 하이브리드 검색 엔진"""

import logging
from contextlib import contextmanager
from threading import Lock
from typing import TYPE_CHECKING, Optional, Sequence

from burmese import highlight_matches, normalize_text, truncate_content

from .errors import (
    DependencyUnavailableError,
    DimensionMismatchError,
    IndexNotReadyError,
    RefreshInProgressError,
)
from .index import DocumentIndex, format_searchable_text, make_document
from .models import IndexReport, ScoredResult, SearchHit, SearchOptions, WordPressPost
from .ranker import HybridRanker

if TYPE_CHECKING:
    from llm import LLMClient

    from .embedder import VoyageEmbedder

logger = logging.getLogger(__name__)


class SearchEngine:
    """게시물 인덱싱 + 하이브리드 검색

    인덱스 갱신은 새 DocumentIndex를 만든 뒤 참조를 교체한다. 진행 중인 검색은
    시작 시점의 인덱스를 계속 읽고, 갱신끼리는 동시에 실행되지 않는다.
    """

    def __init__(
        self,
        embedder: Optional["VoyageEmbedder"] = None,
        llm: Optional["LLMClient"] = None,
        ranker: Optional[HybridRanker] = None,
        batch_size: int = 5,
        content_length: int = 500,
        snippet_length: int = 200,
    ):
        self.embedder = embedder  # None이면 키워드 전용 인덱스
        self.llm = llm
        self.ranker = ranker or HybridRanker()
        self.batch_size = batch_size
        self.content_length = content_length
        self.snippet_length = snippet_length

        self.index = DocumentIndex()
        self._refresh_lock = Lock()

    def index_content(self, posts: Sequence[WordPressPost], rebuild: bool = True) -> IndexReport:
        """게시물 인덱싱 (batch_size 단위 임베딩)

        임베딩 배치가 실패하면 해당 배치의 게시물만 건너뛴다. 문서는 하나씩
        새 인덱스에 추가되고, 하나 이상 성공했을 때만 현재 인덱스를 교체한다.

        Args:
            posts: 인덱싱할 게시물
            rebuild: False면 기존 인덱스에 추가 (같은 ID는 교체)

        Returns:
            인덱싱 결과
        """
        with self._exclusive_refresh():
            index = DocumentIndex() if rebuild else self.index.copy()
            texts = [format_searchable_text(post, self.content_length) for post in posts]
            total = len(posts)
            total_batches = (total + self.batch_size - 1) // self.batch_size
            logger.info(f"게시물 {total}개 인덱싱 시작...")

            indexed = 0
            failed_ids = []
            for batch_no, start in enumerate(range(0, total, self.batch_size), start=1):
                batch_posts = posts[start : start + self.batch_size]
                batch_texts = texts[start : start + self.batch_size]
                logger.debug(f"배치 처리 중 {batch_no}/{total_batches}")

                embeddings: list = [None] * len(batch_posts)
                if self.embedder is not None:
                    try:
                        embeddings = self.embedder.embed_batch(batch_texts)
                    except DependencyUnavailableError as e:
                        logger.warning(f"배치 {batch_no}/{total_batches} 임베딩 실패, 건너뜀: {e}")
                        failed_ids.extend(post.id for post in batch_posts)
                        continue

                for post, text, embedding in zip(batch_posts, batch_texts, embeddings):
                    index.add(make_document(post.id, text, embedding, post=post))
                    indexed += 1

            if indexed > 0 or total == 0:
                self.index = index
            else:
                logger.error("인덱싱된 게시물이 없어 기존 인덱스를 유지합니다")

            logger.info(f"인덱싱 완료: {indexed}/{total}개 (실패 {len(failed_ids)}개)")
            return IndexReport(total=total, indexed=indexed, failed_ids=failed_ids)

    @contextmanager
    def _exclusive_refresh(self):
        """갱신 작업 직렬화 (이미 진행 중이면 대기하지 않고 실패)"""
        if not self._refresh_lock.acquire(blocking=False):
            raise RefreshInProgressError("이미 인덱싱이 진행 중입니다")
        try:
            yield
        finally:
            self._refresh_lock.release()

    def _expand_query(self, query: str) -> list[str]:
        """LLM 쿼리 확장 (실패 시 원본만 사용)"""
        if self.llm is None:
            return [query]
        try:
            expanded = self.llm.expand_query(query)
        except Exception as e:
            logger.warning(f"쿼리 확장 실패, 원본 검색어 사용: {e}")
            return [query]
        return [query, *expanded]

    def _embed_queries(self, queries: Sequence[str]) -> Optional[list[Optional[list[float]]]]:
        """쿼리 임베딩 (실패한 쿼리는 None -> 시맨틱 검색 생략)"""
        if self.embedder is None:
            return None

        embeddings: list[Optional[list[float]]] = []
        for query in queries:
            try:
                embeddings.append(self.embedder.embed_query(query))
            except Exception as e:
                logger.warning(f"시맨틱 검색 실패 ({query}): {e}")
                embeddings.append(None)
        return embeddings

    def hybrid_search(self, query: str, options: Optional[SearchOptions] = None) -> list[SearchHit]:
        """하이브리드 검색 (키워드 + 시맨틱)

        쿼리 확장/임베딩 실패는 키워드 검색으로 대체된다.
        인덱스가 비어 있으면 IndexNotReadyError.
        """
        options = options or SearchOptions()
        index = self.index
        if not index.is_ready:
            raise IndexNotReadyError("인덱싱된 콘텐츠가 없습니다. index_content()를 먼저 호출하세요")

        if not options.enable_keyword_search and not options.enable_semantic_search:
            logger.warning("키워드/시맨틱 검색이 모두 비활성화되어 있습니다")
            return []

        queries = self._expand_query(query) if options.enhance_query else [query]
        normalized_queries = list(dict.fromkeys(q for q in map(normalize_text, queries) if q))
        if not normalized_queries:
            return []

        embeddings = None
        if options.enable_semantic_search:
            embeddings = self._embed_queries(normalized_queries)

        try:
            scored = self.ranker.rank(normalized_queries, index, options, embeddings)
        except DimensionMismatchError as e:
            logger.warning(f"시맨틱 검색 실패, 키워드 결과만 사용: {e}")
            keyword_only = options.model_copy(update={"enable_semantic_search": False})
            scored = self.ranker.rank(normalized_queries, index, keyword_only)

        return [self._to_hit(result, index, query) for result in scored]

    def _to_hit(self, result: ScoredResult, index: DocumentIndex, query: str) -> SearchHit:
        document = index.get(result.document_id)
        post = document.post if document else None

        title = post.title if post else ""
        content = post.content if post else (document.normalized_text if document else "")

        return SearchHit(
            id=result.document_id,
            title=title,
            type=post.type if post else "post",
            date=post.date if post else None,
            highlighted_title=highlight_matches(title, query),
            highlighted_content=highlight_matches(
                truncate_content(content, self.snippet_length), query
            ),
            lexical_score=result.lexical_score,
            semantic_score=result.semantic_score,
            combined_score=result.combined_score,
        )

    def get_index_stats(self) -> dict:
        return self.index.stats()

    def clear_index(self):
        """인덱스 비우기 (갱신 중이면 RefreshInProgressError)"""
        with self._exclusive_refresh():
            self.index = DocumentIndex()
        logger.info("검색 인덱스 비움")

