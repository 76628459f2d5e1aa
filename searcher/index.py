"""인메모리 문서 인덱스"""

from typing import Iterable, Iterator, Optional

from burmese import normalize_text, tokenize, truncate_content

from .models import DocumentId, IndexedDocument, WordPressPost

DEFAULT_DIMENSION = 1536


def format_searchable_text(post: WordPressPost, content_length: int = 500) -> str:
    """게시물을 검색용 텍스트로 변환 (제목 + 잘린 본문 + 요약)"""
    content = truncate_content(post.content or "", content_length)
    return normalize_text(f"{post.title} {content} {post.excerpt or ''}")


def make_document(
    doc_id: DocumentId,
    text: str,
    embedding: Optional[Iterable[float]] = None,
    post: Optional[WordPressPost] = None,
) -> IndexedDocument:
    """텍스트를 정규화/토큰화하여 인덱스 문서 생성"""
    normalized = normalize_text(text)
    return IndexedDocument(
        id=doc_id,
        normalized_text=normalized,
        tokens=tuple(tokenize(normalized)),
        embedding=tuple(embedding) if embedding is not None else None,
        post=post,
    )


class DocumentIndex:
    """검색 대상 문서 집합

    검색 중에는 읽기 전용으로 취급한다. 갱신은 copy()한 새 인덱스에 문서를
    추가한 뒤 참조를 교체하는 방식으로 한다.
    """

    def __init__(self, documents: Optional[Iterable[IndexedDocument]] = None):
        self._documents: dict[DocumentId, IndexedDocument] = {}
        if documents is not None:
            self.build(documents)

    def build(self, documents: Iterable[IndexedDocument]) -> int:
        """기존 문서를 비우고 새로 구축"""
        self.clear()
        for document in documents:
            self.add(document)
        return len(self._documents)

    def add(self, document: IndexedDocument):
        """문서 단위 추가 (같은 ID면 교체)"""
        self._documents[document.id] = document

    def clear(self):
        self._documents.clear()

    @property
    def is_ready(self) -> bool:
        return bool(self._documents)

    def get(self, doc_id: DocumentId) -> Optional[IndexedDocument]:
        return self._documents.get(doc_id)

    def copy(self) -> "DocumentIndex":
        # 문서는 불변이므로 얕은 복사로 충분
        return DocumentIndex(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[IndexedDocument]:
        return iter(list(self._documents.values()))

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def stats(self) -> dict:
        """인덱스 통계 (메모리는 float32 임베딩 기준 추정치)"""
        with_embeddings = [d for d in self._documents.values() if d.embedding is not None]
        dimension = len(with_embeddings[0].embedding) if with_embeddings else DEFAULT_DIMENSION
        memory_mb = len(self._documents) * dimension * 4 / 1024 / 1024
        return {
            "total_indexed": len(self._documents),
            "with_embeddings": len(with_embeddings),
            "memory_usage": f"{memory_mb:.2f} MB",
        }
