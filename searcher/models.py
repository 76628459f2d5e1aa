"""검색 관련 데이터 모델"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DocumentId = Union[int, str]


class WordPressPost(BaseModel):
    """문서 소스가 반환하는 게시물 (공개된 post/page만)"""

    id: int
    title: str = ""
    content: str = ""
    excerpt: str = ""
    type: str = "post"  # post | page
    date: Optional[datetime] = None
    slug: str = ""  # post_name


class IndexedDocument(BaseModel):
    """인메모리 인덱스의 검색 단위 (구축 후 불변)"""

    model_config = ConfigDict(frozen=True)

    id: DocumentId
    normalized_text: str
    tokens: tuple[str, ...] = ()
    embedding: Optional[tuple[float, ...]] = None  # 시맨틱 검색 비활성 시 None
    post: Optional[WordPressPost] = None


class ScoredResult(BaseModel):
    """쿼리마다 새로 계산되는 점수 (저장하지 않음)"""

    document_id: DocumentId
    lexical_score: float = 0.0
    semantic_score: float = 0.0
    combined_score: float = 0.0


class SearchOptions(BaseModel):
    """하이브리드 검색 옵션"""

    limit: int = Field(default=10, ge=1)
    semantic_threshold: float = 0.7
    enable_semantic_search: bool = True
    enable_keyword_search: bool = True
    enhance_query: bool = True


class SearchHit(BaseModel):
    """검색 결과 항목"""

    id: DocumentId
    title: str = ""
    type: str = "post"
    date: Optional[datetime] = None
    url: str = ""

    highlighted_title: str = ""
    highlighted_content: str = ""
    summary: Optional[str] = None

    # 검색 메타
    lexical_score: float = 0.0
    semantic_score: float = 0.0
    combined_score: float = 0.0


class SearchResponse(BaseModel):
    """검색 응답"""

    query: str
    total: int
    results: list[SearchHit]


class BackendHit(BaseModel):
    """외부 문서 인덱스 백엔드의 검색 결과"""

    id: str
    table: str = "unknown"
    score: float = 0.0
    data: dict = {}
    highlights: dict[str, list[str]] = {}


class IndexReport(BaseModel):
    """인덱싱 결과"""

    total: int = 0
    indexed: int = 0
    failed_ids: list[DocumentId] = []

    @property
    def success(self) -> bool:
        return not self.failed_ids
