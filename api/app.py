"""FastAPI 애플리케이션"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from searcher import (
    AgentOptions,
    DependencyUnavailableError,
    IndexNotReadyError,
    IndexReport,
    InputError,
    PostNotFoundError,
    RefreshInProgressError,
    SearchAgent,
    SearchError,
    SearchHit,
    SearchResponse,
)

logger = logging.getLogger(__name__)


class SuggestResponse(BaseModel):
    """검색어 제안 응답"""

    query: str
    suggestions: list[str]


class RelatedResponse(BaseModel):
    """관련 게시물 응답"""

    post_id: int
    results: list[SearchHit]


class RefreshResponse(BaseModel):
    """인덱스 갱신 응답"""

    success: bool
    total: int
    indexed: int
    failed_ids: list


# 에러 -> HTTP 상태 코드 (먼저 맞는 항목 사용)
ERROR_STATUS = [
    (PostNotFoundError, 404),
    (InputError, 400),
    (RefreshInProgressError, 409),
    (IndexNotReadyError, 503),
    (DependencyUnavailableError, 503),
]

# 전역 에이전트 인스턴스
_agent: Optional[SearchAgent] = None


def get_agent() -> SearchAgent:
    """에이전트 인스턴스 반환"""
    if _agent is None:
        raise IndexNotReadyError("Agent not initialized")
    return _agent


def create_app(
    agent: Optional[SearchAgent] = None,
    options: Optional[AgentOptions] = None,
    data_dir: Path = Path("data"),
) -> FastAPI:
    """FastAPI 앱 생성 (agent를 주지 않으면 환경변수로 생성)"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 라이프사이클 관리"""
        global _agent
        _agent = agent or SearchAgent.from_env(options=options, data_dir=data_dir)
        _agent.initialize()
        yield
        _agent.close()
        _agent = None

    app = FastAPI(
        title="WordPress Burmese Search API",
        description="미얀마어 WordPress 콘텐츠 하이브리드 검색 API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SearchError)
    async def search_error_handler(request: Request, exc: SearchError):
        status_code = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
        if status_code >= 500:
            logger.error(f"{request.url.path} 실패: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/")
    def root():
        """API 상태 확인"""
        return {"status": "ok", "message": "WordPress Burmese Search API"}

    @app.get("/search", response_model=SearchResponse)
    def search(
        q: str = Query(..., description="검색어"),
        limit: int = Query(10, ge=1, le=100, description="결과 수"),
        offset: int = Query(0, ge=0, description="오프셋"),
        tables: Optional[list[str]] = Query(None, description="검색할 테이블 (백엔드 사용 시)"),
        enhance: Optional[bool] = Query(None, description="LLM 쿼리 확장 여부"),
    ):
        """게시물 검색"""
        return get_agent().search(q, limit=limit, offset=offset, tables=tables, enhance_query=enhance)

    @app.get("/suggest", response_model=SuggestResponse)
    def suggest(
        q: str = Query(..., description="입력 중인 검색어"),
        limit: int = Query(5, ge=1, le=20, description="제안 수"),
    ):
        """검색어 제안"""
        return SuggestResponse(query=q, suggestions=get_agent().suggest_search_terms(q, limit))

    @app.get("/posts/{post_id}/related", response_model=RelatedResponse)
    def related(post_id: int, limit: int = Query(5, ge=1, le=20, description="결과 수")):
        """관련 게시물"""
        return RelatedResponse(post_id=post_id, results=get_agent().get_related_posts(post_id, limit))

    @app.get("/stats")
    def stats():
        """인덱스 통계"""
        return get_agent().get_stats()

    @app.post("/refresh", response_model=RefreshResponse)
    def refresh():
        """인덱스 재구축"""
        report: IndexReport = get_agent().refresh_index()
        return RefreshResponse(
            success=report.success,
            total=report.total,
            indexed=report.indexed,
            failed_ids=report.failed_ids,
        )

    return app
