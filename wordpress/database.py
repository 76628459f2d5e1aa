"""WordPress 데이터베이스 (게시물 소스)"""

import logging
import os
import re
from typing import Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from searcher.errors import DependencyUnavailableError
from searcher.models import WordPressPost

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PREFIX = "wp_"

# fetch_table_records로 읽을 수 있는 테이블 (접두사 제외)
SUPPORTED_TABLES = ("posts", "postmeta", "terms", "term_taxonomy")

POST_COLUMNS = """
    ID,
    post_title,
    post_content,
    post_excerpt,
    post_date,
    post_status,
    post_type,
    post_name
"""

PUBLISHED_FILTER = "post_status = 'publish' AND post_type IN ('post', 'page')"


def database_url_from_env() -> URL:
    """DB_* 환경변수로 MySQL 접속 URL 생성"""
    return URL.create(
        "mysql+pymysql",
        username=os.getenv("DB_USER"),
        password=os.getenv("DB_PASSWORD"),
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "3306")),
        database=os.getenv("DB_NAME"),
        query={"charset": "utf8mb4"},
    )


def escape_like(term: str) -> str:
    """LIKE 와일드카드 이스케이프 (이스케이프 문자는 '!', MySQL/SQLite 공통)"""
    return term.replace("!", "!!").replace("%", "!%").replace("_", "!_")


def row_to_post(row) -> WordPressPost:
    """posts 테이블 행 -> WordPressPost"""
    return WordPressPost(
        id=row["ID"],
        title=row["post_title"] or "",
        content=row["post_content"] or "",
        excerpt=row["post_excerpt"] or "",
        type=row["post_type"] or "post",
        date=row["post_date"],
        slug=row.get("post_name") or "",
    )


class WordPressDatabase:
    """WordPress 게시물 조회 (공개된 post/page만)

    DATABASE_URL이 있으면 그대로 쓰고, 없으면 DB_* 환경변수로 MySQL URL을 만든다.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        table_prefix: Optional[str] = None,
        engine: Optional[Engine] = None,
    ):
        self.url = url or os.getenv("DATABASE_URL") or database_url_from_env()

        if table_prefix is None:
            table_prefix = os.getenv("TABLE_PREFIX", DEFAULT_TABLE_PREFIX)
        # 테이블명은 바인딩할 수 없으므로 식별자 문자만 허용
        if not re.fullmatch(r"\w*", table_prefix):
            raise ValueError(f"잘못된 테이블 접두사: {table_prefix!r}")
        self.table_prefix = table_prefix

        self._engine = engine

    @property
    def posts_table(self) -> str:
        return f"{self.table_prefix}posts"

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self.connect()
        return self._engine

    def connect(self):
        """엔진 생성 및 접속 확인"""
        if self._engine is None:
            self._engine = create_engine(self.url, pool_pre_ping=True)
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise DependencyUnavailableError("database", str(e)) from e
        logger.info("WordPress 데이터베이스 연결됨")

    def close(self):
        """커넥션 풀 정리"""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("데이터베이스 연결 종료")

    def _fetch(self, sql: str, params: Optional[dict] = None) -> list[dict]:
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text(sql), params or {})
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise DependencyUnavailableError("database", str(e)) from e

    def fetch_documents(self, limit: int = 10) -> list[WordPressPost]:
        """공개된 게시물/페이지 (최신순)"""
        rows = self._fetch(
            f"""
            SELECT {POST_COLUMNS}
            FROM {self.posts_table}
            WHERE {PUBLISHED_FILTER}
            ORDER BY post_date DESC
            LIMIT :limit
            """,
            {"limit": max(1, int(limit))},
        )
        return [row_to_post(row) for row in rows]

    def search_posts(self, term: str, limit: int = 10) -> list[WordPressPost]:
        """제목/본문/요약 LIKE 검색"""
        rows = self._fetch(
            f"""
            SELECT {POST_COLUMNS}
            FROM {self.posts_table}
            WHERE {PUBLISHED_FILTER}
              AND (
                  post_title LIKE :pattern ESCAPE '!'
                  OR post_content LIKE :pattern ESCAPE '!'
                  OR post_excerpt LIKE :pattern ESCAPE '!'
              )
            ORDER BY post_date DESC
            LIMIT :limit
            """,
            {"pattern": f"%{escape_like(term)}%", "limit": max(1, int(limit))},
        )
        return [row_to_post(row) for row in rows]

    def get_post_by_id(self, post_id: int) -> Optional[WordPressPost]:
        """ID로 공개 게시물 조회 (없으면 None)"""
        rows = self._fetch(
            f"SELECT {POST_COLUMNS} FROM {self.posts_table} WHERE ID = :id AND {PUBLISHED_FILTER}",
            {"id": post_id},
        )
        return row_to_post(rows[0]) if rows else None

    def fetch_table_records(self, table: str, limit: int = 1000) -> list[dict]:
        """테이블 원본 레코드 (백엔드 인덱싱용)"""
        if table not in SUPPORTED_TABLES:
            raise ValueError(f"지원하지 않는 테이블: {table}")
        return self._fetch(
            f"SELECT * FROM {self.table_prefix}{table} LIMIT :limit",
            {"limit": max(1, int(limit))},
        )

    def fetch_all_tables(self, limit: int = 1000) -> dict[str, list[dict]]:
        """존재하는 지원 테이블의 레코드 전체"""
        try:
            existing = set(inspect(self.engine).get_table_names())
        except SQLAlchemyError as e:
            raise DependencyUnavailableError("database", str(e)) from e

        records = {}
        for table in SUPPORTED_TABLES:
            if f"{self.table_prefix}{table}" in existing:
                records[table] = self.fetch_table_records(table, limit)
        return records

    def check_table_exists(self) -> bool:
        """posts 테이블 존재 여부"""
        try:
            return inspect(self.engine).has_table(self.posts_table)
        except (SQLAlchemyError, DependencyUnavailableError) as e:
            logger.error(f"테이블 확인 실패: {e}")
            return False

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
