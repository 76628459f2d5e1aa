"""Chroma DB 문서 인덱스 백엔드 (WordPress 테이블 단위 인덱싱)"""

import logging
from pathlib import Path
from typing import Optional

import chromadb
from chromadb.config import Settings

from burmese import highlight_matches, normalize_text

from .embedder import VoyageEmbedder
from .errors import DependencyUnavailableError, IndexNotReadyError
from .models import BackendHit, IndexReport

logger = logging.getLogger(__name__)

# 테이블별 (기본 키, {인덱스 필드: 원본 컬럼})
TABLE_FIELDS = {
    "posts": ("ID", {"title": "post_title", "content": "post_content", "excerpt": "post_excerpt"}),
    "postmeta": ("meta_id", {"meta_value": "meta_value"}),
    "terms": ("term_id", {"term_name": "name"}),
    "term_taxonomy": ("term_taxonomy_id", {"description": "description"}),
}

HIGHLIGHT_FIELDS = ("title", "content", "excerpt")


def process_record(record: dict, table: str) -> dict:
    """테이블 레코드에 검색 필드와 source_table 추가"""
    processed = dict(record)
    _, fields = TABLE_FIELDS.get(table, ("id", {}))
    for field, column in fields.items():
        processed[field] = record.get(column) or ""
    processed["source_table"] = table
    return processed


def record_id(record: dict, table: str) -> str:
    """Chroma 문서 ID (테이블:기본키)"""
    key, _ = TABLE_FIELDS.get(table, ("id", {}))
    return f"{table}:{record[key]}"


def format_record(processed: dict) -> str:
    """검색 필드를 이어 붙인 정규화 문서"""
    _, fields = TABLE_FIELDS.get(processed["source_table"], ("id", {}))
    return normalize_text(" ".join(str(processed[field]) for field in fields))


def extract_metadata(processed: dict) -> dict:
    """Chroma 메타데이터 (None 제외, 스칼라 외 값은 문자열)"""
    metadata = {}
    for key, value in processed.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            metadata[key] = value
        else:
            metadata[key] = str(value)
    return metadata


class ChromaBackend:
    """Chroma DB 기반 문서 인덱스

    인메모리 SearchEngine 대신 쓰는 백엔드. 점수는 1 - 코사인 거리.
    """

    COLLECTION_NAME = "wordpress_backup"

    def __init__(
        self,
        data_dir: Path = Path("data"),
        embedder: Optional[VoyageEmbedder] = None,
        client=None,
        collection_name: str = COLLECTION_NAME,
        batch_size: int = 5,
    ):
        self.data_dir = data_dir
        self.collection_name = collection_name
        self.batch_size = batch_size

        # Chroma 클라이언트 (영구 저장, 테스트에서는 주입)
        self.client = client or chromadb.PersistentClient(
            path=str(data_dir / "chroma_db"),
            settings=Settings(anonymized_telemetry=False),
        )

        self._embedder = embedder
        self._own_embedder = False

    @property
    def embedder(self) -> VoyageEmbedder:
        if self._embedder is None:
            self._embedder = VoyageEmbedder(batch_size=self.batch_size)
            self._own_embedder = True
        return self._embedder

    def get_or_create_collection(self, name: Optional[str] = None):
        """컬렉션 가져오기 또는 생성"""
        return self.client.get_or_create_collection(
            name=name or self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def delete_collection(self, name: Optional[str] = None):
        """컬렉션 삭제 (없으면 무시)"""
        name = name or self.collection_name
        existing = {getattr(c, "name", c) for c in self.client.list_collections()}
        if name in existing:
            self.client.delete_collection(name)
            logger.info(f"컬렉션 '{name}' 삭제됨")

    @property
    def staging_name(self) -> str:
        return f"{self.collection_name}_staging"

    def build(self, records_by_table: dict[str, list[dict]], rebuild: bool = True) -> IndexReport:
        """테이블별 레코드 인덱싱 (실패한 배치는 건너뜀)

        rebuild면 임시 컬렉션에 구축한 뒤 하나 이상 성공했을 때만 교체한다.
        모든 배치가 실패하면 기존 컬렉션을 그대로 둔다.

        Args:
            records_by_table: {테이블명: 레코드 목록}
            rebuild: True면 새로 구축해서 교체, False면 기존 컬렉션에 추가

        Returns:
            인덱싱 결과 (failed_ids는 "테이블:기본키")
        """
        if rebuild:
            self.delete_collection(self.staging_name)
            collection = self.get_or_create_collection(self.staging_name)
        else:
            collection = self.get_or_create_collection()

        ids = []
        documents = []
        metadatas = []
        for table, records in records_by_table.items():
            logger.info(f"{table} 테이블 레코드 {len(records)}개 처리 중...")
            for record in records:
                processed = process_record(record, table)
                ids.append(record_id(record, table))
                documents.append(format_record(processed))
                metadatas.append(extract_metadata(processed))

        total = len(ids)
        indexed = 0
        failed_ids = []
        for i in range(0, total, self.batch_size):
            end = min(i + self.batch_size, total)
            try:
                embeddings = self.embedder.embed_batch(documents[i:end])
            except DependencyUnavailableError as e:
                logger.warning(f"레코드 {i + 1}-{end} 임베딩 실패, 건너뜀: {e}")
                failed_ids.extend(ids[i:end])
                continue

            collection.upsert(
                ids=ids[i:end],
                embeddings=embeddings,
                documents=documents[i:end],
                metadatas=metadatas[i:end],
            )
            indexed += end - i
            logger.debug(f"저장: {end}/{total}")

        if rebuild:
            if indexed > 0 or total == 0:
                self.delete_collection()
                collection.modify(name=self.collection_name)
            else:
                logger.error("인덱싱된 레코드가 없어 기존 컬렉션을 유지합니다")
                self.delete_collection(self.staging_name)

        logger.info(f"백엔드 인덱싱 완료: {indexed}/{total}개 (실패 {len(failed_ids)}개)")
        return IndexReport(total=total, indexed=indexed, failed_ids=failed_ids)

    def index_document(self, record: dict, table: str):
        """레코드 하나 추가/갱신"""
        processed = process_record(record, table)
        document = format_record(processed)
        embedding = self.embedder.embed_single(document)
        self.get_or_create_collection().upsert(
            ids=[record_id(record, table)],
            embeddings=[embedding],
            documents=[document],
            metadatas=[extract_metadata(processed)],
        )

    def query(
        self,
        text: str,
        tables: Optional[list[str]] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[BackendHit]:
        """벡터 검색

        Args:
            text: 검색어
            tables: 검색할 테이블 (없으면 전체)
            limit: 최대 결과 수
            offset: 건너뛸 결과 수

        Returns:
            점수 내림차순 결과

        Raises:
            IndexNotReadyError: 컬렉션이 비어 있음
        """
        collection = self.get_or_create_collection()
        count = collection.count()
        if count == 0:
            raise IndexNotReadyError("인덱싱된 레코드가 없습니다. build()를 먼저 호출하세요")

        where = None
        if tables:
            if len(tables) == 1:
                where = {"source_table": tables[0]}
            else:
                where = {"source_table": {"$in": tables}}

        query_embedding = self.embedder.embed_query(normalize_text(text))
        results = collection.query(
            query_embeddings=[query_embedding],
            n_results=min(limit + offset, count),
            where=where,
            include=["metadatas", "distances"],
        )

        hits = []
        ids = results["ids"][0]
        metadatas = results["metadatas"][0]
        distances = results["distances"][0]
        for doc_id, metadata, distance in zip(ids, metadatas, distances):
            data = dict(metadata or {})
            highlights = {}
            for field in HIGHLIGHT_FIELDS:
                value = data.get(field)
                if value:
                    highlighted = highlight_matches(str(value), text)
                    if highlighted != value:
                        highlights[field] = [highlighted]

            hits.append(
                BackendHit(
                    id=doc_id,
                    table=data.get("source_table", "unknown"),
                    score=1 - distance,
                    data=data,
                    highlights=highlights,
                )
            )
        return hits[offset:]

    def available_tables(self) -> list[dict]:
        """인덱싱된 테이블별 레코드 수"""
        collection = self.get_or_create_collection()
        if collection.count() == 0:
            return []

        counts: dict[str, int] = {}
        for metadata in collection.get(include=["metadatas"])["metadatas"]:
            table = (metadata or {}).get("source_table", "unknown")
            counts[table] = counts.get(table, 0) + 1
        return [{"table": table, "count": count} for table, count in counts.items()]

    def close(self):
        """리소스 정리"""
        if self._own_embedder and self._embedder:
            self._embedder.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def group_by_table(hits: list[BackendHit]) -> dict[str, list[BackendHit]]:
    """결과를 테이블별로 묶기 (순서 유지)"""
    grouped: dict[str, list[BackendHit]] = {}
    for hit in hits:
        grouped.setdefault(hit.table, []).append(hit)
    return grouped
