"""문자열 유사도 (토큰 Jaccard / 발음 일치 / 부분 문자열 포함)"""

from functools import lru_cache
from typing import Optional

from .normalizer import normalize_text
from .tokenizer import tokenize
from .variants import VariantExpander, default_expander

PHONETIC_MATCH_SCORE = 0.8
CONTAINMENT_SCORE = 0.6


def jaccard(tokens1: set[str], tokens2: set[str]) -> float:
    """토큰 집합 Jaccard 지수 (합집합이 비면 0)"""
    union = tokens1 | tokens2
    if not union:
        return 0.0
    return len(tokens1 & tokens2) / len(union)


class SimilarityScorer:
    """두 문자열의 유사도를 [0, 1]로 계산

    세 신호 중 최댓값을 사용한다. 평균이 아니라 강한 신호 하나가 이긴다.
    - 토큰 집합 Jaccard 지수
    - 발음 변형끼리 하나라도 일치하면 0.8
    - 한쪽이 다른 쪽을 부분 문자열로 포함하면 0.6
    """

    def __init__(self, expander: Optional[VariantExpander] = None):
        self.expander = expander or default_expander
        self._phonetic_variants = lru_cache(maxsize=8192)(self._compute_phonetic_variants)

    def _compute_phonetic_variants(self, normalized: str) -> frozenset[str]:
        return frozenset(self.expander.generate_phonetic_variants(normalized))

    def similarity(self, text1: str, text2: str) -> float:
        normalized1 = normalize_text(text1)
        normalized2 = normalize_text(text2)

        if not normalized1 or not normalized2:
            return 0.0
        if normalized1 == normalized2:
            return 1.0

        jaccard_score = jaccard(set(tokenize(normalized1)), set(tokenize(normalized2)))

        phonetic_score = 0.0
        if self._phonetic_variants(normalized1) & self._phonetic_variants(normalized2):
            phonetic_score = PHONETIC_MATCH_SCORE

        partial_score = 0.0
        if normalized1 in normalized2 or normalized2 in normalized1:
            partial_score = CONTAINMENT_SCORE

        return max(jaccard_score, phonetic_score, partial_score)


default_scorer = SimilarityScorer()


def similarity(text1: str, text2: str) -> float:
    """기본 사전 기준 유사도"""
    return default_scorer.similarity(text1, text2)
