"""하이브리드 랭킹 (키워드 + 시맨틱)"""

from typing import Callable, Iterable, Optional, Sequence

from burmese import SimilarityScorer, is_burmese, tokenize

from .config import RankingConfig
from .embedder import cosine_similarity
from .models import DocumentId, IndexedDocument, ScoredResult, SearchOptions

VectorSimilarity = Callable[[Sequence[float], Sequence[float]], float]


class HybridRanker:
    """키워드 점수와 임베딩 유사도를 가중 합산하여 순위 결정

    순수 CPU 연산만 한다. 쿼리 임베딩은 호출자가 만들어 넘긴다.
    """

    def __init__(
        self,
        config: Optional[RankingConfig] = None,
        scorer: Optional[SimilarityScorer] = None,
        vector_similarity: VectorSimilarity = cosine_similarity,
    ):
        self.config = config or RankingConfig()
        self.scorer = scorer or SimilarityScorer()
        self.vector_similarity = vector_similarity

    @property
    def expander(self):
        return self.scorer.expander

    def count_fuzzy_matches(self, variant: str, tokens: Sequence[str]) -> int:
        """길이가 ±1 이내이고 유사도가 임계값을 넘는 문서 토큰 수"""
        tolerance = self.config.fuzzy_length_tolerance
        threshold = self.config.fuzzy_similarity_threshold
        length = len(variant)

        matches = 0
        for token in tokens:
            if length - tolerance <= len(token) <= length + tolerance:
                if self.scorer.similarity(variant, token) > threshold:
                    matches += 1
        return matches

    def _variant_score(self, variant: str, document: IndexedDocument) -> float:
        config = self.config
        text = document.normalized_text

        score = self.scorer.similarity(text, variant)
        if is_burmese(variant):
            if variant in text:
                score += config.exact_match_bonus
            score += self.count_fuzzy_matches(variant, document.tokens) * config.fuzzy_match_bonus
        elif variant.lower() in text.lower():
            score += config.latin_match_bonus
        return score

    def _token_pair_score(self, query_tokens: Sequence[str], document: IndexedDocument) -> float:
        config = self.config
        score = 0.0
        for query_token in query_tokens:
            for token in document.tokens:
                token_similarity = self.scorer.similarity(query_token, token)
                if token_similarity > config.token_pair_threshold:
                    score += token_similarity * config.token_pair_bonus
        return score

    def lexical_search(
        self,
        query_variants: Sequence[str],
        corpus: Iterable[IndexedDocument],
        query_tokens: Optional[Sequence[str]] = None,
    ) -> dict[DocumentId, float]:
        """키워드 검색

        문서마다 변형별 점수(기본 유사도 + 보너스)의 최댓값에 토큰 쌍 보너스를
        더하고 상한을 적용한다.

        Args:
            query_variants: 검색어 변형 (첫 항목은 정규화된 원문)
            corpus: 검색 대상 문서
            query_tokens: 토큰 쌍 비교용 토큰 (기본: 첫 변형의 토큰)

        Returns:
            {문서 ID: 점수} (min_lexical_score 이하 제외)
        """
        if not query_variants:
            return {}
        if query_tokens is None:
            query_tokens = tokenize(query_variants[0])

        config = self.config
        scores: dict[DocumentId, float] = {}
        for document in corpus:
            score = max(self._variant_score(v, document) for v in query_variants)
            score += self._token_pair_score(query_tokens, document)
            score = min(score, config.lexical_ceiling)

            if score > config.min_lexical_score:
                scores[document.id] = score
        return scores

    def semantic_search(
        self,
        query_embedding: Sequence[float],
        corpus: Iterable[IndexedDocument],
        threshold: float = 0.7,
    ) -> dict[DocumentId, float]:
        """임베딩 코사인 유사도가 threshold 이상인 문서"""
        scores: dict[DocumentId, float] = {}
        for document in corpus:
            if document.embedding is None:
                continue
            score = self.vector_similarity(query_embedding, document.embedding)
            if score >= threshold:
                scores[document.id] = score
        return scores

    def combine(self, lexical_score: float, semantic_score: float) -> float:
        return (
            self.config.lexical_weight * lexical_score
            + self.config.semantic_weight * semantic_score
        )

    def merge(
        self,
        lexical: dict[DocumentId, float],
        semantic: dict[DocumentId, float],
        limit: int = 10,
    ) -> list[ScoredResult]:
        """두 검색 결과를 합쳐 결합 점수 내림차순 정렬 (한쪽에만 있으면 다른 쪽 0)"""
        results = []
        for doc_id in dict.fromkeys([*lexical, *semantic]):
            lexical_score = lexical.get(doc_id, 0.0)
            semantic_score = semantic.get(doc_id, 0.0)
            results.append(
                ScoredResult(
                    document_id=doc_id,
                    lexical_score=lexical_score,
                    semantic_score=semantic_score,
                    combined_score=self.combine(lexical_score, semantic_score),
                )
            )

        # 안정 정렬: 동점이면 코퍼스 순서 유지
        results.sort(key=lambda r: r.combined_score, reverse=True)
        return results[:limit]

    def rank(
        self,
        queries: Sequence[str],
        corpus: Iterable[IndexedDocument],
        options: Optional[SearchOptions] = None,
        query_embeddings: Optional[Sequence[Optional[Sequence[float]]]] = None,
    ) -> list[ScoredResult]:
        """확장된 검색어들로 키워드/시맨틱 검색 후 문서별 최댓값으로 병합

        Args:
            queries: 검색어 목록 (원문 + 쿼리 확장 결과)
            corpus: 검색 대상 문서
            options: 검색 옵션
            query_embeddings: queries와 같은 순서의 쿼리 임베딩 (없으면 None)

        Returns:
            결합 점수 순 결과 (최대 options.limit개)
        """
        options = options or SearchOptions()
        documents = list(corpus)

        lexical: dict[DocumentId, float] = {}
        semantic: dict[DocumentId, float] = {}

        for i, query in enumerate(queries):
            if options.enable_keyword_search:
                variants = self.expander.create_search_variants(query)
                for doc_id, score in self.lexical_search(variants, documents).items():
                    lexical[doc_id] = max(lexical.get(doc_id, 0.0), score)

            if options.enable_semantic_search and query_embeddings is not None:
                query_embedding = query_embeddings[i]
                if query_embedding is None:
                    continue
                found = self.semantic_search(query_embedding, documents, options.semantic_threshold)
                for doc_id, score in found.items():
                    semantic[doc_id] = max(semantic.get(doc_id, 0.0), score)

        return self.merge(lexical, semantic, options.limit)
