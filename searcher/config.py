"""검색 설정"""

import math

from pydantic import BaseModel, model_validator


class RankingConfig(BaseModel):
    """하이브리드 랭킹 상수

    가중치/보너스 값은 경험적으로 정해진 값이다. 필요하면 여기서 조정한다.
    """

    lexical_weight: float = 0.4
    semantic_weight: float = 0.6

    lexical_ceiling: float = 2.0  # 키워드 점수 상한 (확률 아님)
    min_lexical_score: float = 0.1  # 이 값 이하 문서는 키워드 결과에서 제외

    exact_match_bonus: float = 0.8  # 버마어 변형이 문서에 그대로 포함
    fuzzy_match_bonus: float = 0.3  # 유사 토큰 1개당
    latin_match_bonus: float = 0.5  # 비버마어 변형의 대소문자 무시 포함
    token_pair_bonus: float = 0.4  # (검색 토큰, 문서 토큰) 유사도 가중치

    fuzzy_similarity_threshold: float = 0.6
    fuzzy_length_tolerance: int = 1
    token_pair_threshold: float = 0.7

    @model_validator(mode="after")
    def _check_weights(self) -> "RankingConfig":
        if not math.isclose(self.lexical_weight + self.semantic_weight, 1.0):
            raise ValueError("lexical_weight + semantic_weight 는 1.0 이어야 합니다")
        return self


class AgentOptions(BaseModel):
    """SearchAgent 동작 옵션"""

    auto_index: bool = True
    max_index_size: int = 1000
    similarity_threshold: float = 0.7
    enable_summarization: bool = True
    enable_query_enhancement: bool = True
    use_backend: bool = False  # True면 Chroma 백엔드 토폴로지 사용

    summary_min_length: int = 300  # 이보다 긴 본문만 요약
    summary_max_length: int = 150

    embedding_batch_size: int = 5  # 임베딩 제공자 토큰 한도
    index_content_length: int = 500
    snippet_length: int = 200
