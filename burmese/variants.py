"""검색어 변형 생성 (동의어 + 발음 유사 자음)"""

from typing import Optional

from .normalizer import normalize_text
from .tables import PHONETIC_SIMILARITY, SYNONYMS
from .tokenizer import tokenize


def _unique(items: list[str]) -> list[str]:
    """순서를 유지한 중복 제거"""
    return list(dict.fromkeys(items))


class VariantExpander:
    """동의어/발음 사전 기반 검색어 변형 생성기"""

    def __init__(
        self,
        synonyms: Optional[dict[str, list[str]]] = None,
        phonetic: Optional[dict[str, list[str]]] = None,
    ):
        self.synonyms = SYNONYMS if synonyms is None else synonyms
        self.phonetic = PHONETIC_SIMILARITY if phonetic is None else phonetic

    def expand_synonyms(self, term: str) -> list[str]:
        """동의어 치환 변형 (원본 포함, 중복 제거)

        검색어에 사전 키가 포함되어 있으면 그 키를 각 대체어로 치환한다.
        역방향(대체어 -> 키)은 대체어가 별도 키로 등록된 경우에만 적용된다.

        Args:
            term: 검색어

        Returns:
            [원본, 치환 변형...] (빈 검색어면 [])
        """
        if not term:
            return []

        expanded = [term]
        for key, alternates in self.synonyms.items():
            if key in term:
                for alternate in alternates:
                    expanded.append(term.replace(key, alternate, 1))
        return _unique(expanded)

    def generate_phonetic_variants(self, text: str) -> list[str]:
        """토큰 첫 글자만 혼동 자음으로 바꾼 변형 목록"""
        variants = []
        for token in tokenize(text):
            alternates = self.phonetic.get(token[0])
            if not alternates:
                continue
            for alternate in alternates:
                variants.append(alternate + token[1:])
        return variants

    def create_search_variants(self, text: str) -> list[str]:
        """검색에 사용할 전체 변형 집합

        정규화된 원문 + 동의어 변형 + 발음 변형
        + (토큰이 2개 이상이면) 길이 2 이상인 개별 토큰

        Returns:
            중복 제거된 변형 목록, 첫 항목은 정규화된 원문 (빈 입력이면 [])
        """
        normalized = normalize_text(text)
        if not normalized:
            return []

        variants = [normalized]
        variants.extend(self.expand_synonyms(normalized))
        variants.extend(self.generate_phonetic_variants(normalized))

        tokens = tokenize(normalized)
        if len(tokens) > 1:
            variants.extend(token for token in tokens if len(token) > 1)

        return _unique(variants)


# 기본 사전을 사용하는 공용 인스턴스
default_expander = VariantExpander()


def expand_synonyms(term: str) -> list[str]:
    return default_expander.expand_synonyms(term)


def generate_phonetic_variants(text: str) -> list[str]:
    return default_expander.generate_phonetic_variants(text)


def create_search_variants(text: str) -> list[str]:
    return default_expander.create_search_variants(text)
