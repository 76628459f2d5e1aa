"""검색 엔진 모듈"""

from .agent import SearchAgent
from .backend import ChromaBackend, group_by_table
from .config import AgentOptions, RankingConfig
from .embedder import VoyageEmbedder, cosine_similarity
from .engine import SearchEngine
from .errors import (
    DependencyUnavailableError,
    DimensionMismatchError,
    IndexNotReadyError,
    InputError,
    PostNotFoundError,
    RefreshInProgressError,
    SearchError,
)
from .index import DocumentIndex, make_document
from .models import (
    BackendHit,
    IndexedDocument,
    IndexReport,
    ScoredResult,
    SearchHit,
    SearchOptions,
    SearchResponse,
    WordPressPost,
)
from .ranker import HybridRanker

__all__ = [
    "SearchAgent",
    "SearchEngine",
    "HybridRanker",
    "ChromaBackend",
    "group_by_table",
    "VoyageEmbedder",
    "cosine_similarity",
    "DocumentIndex",
    "make_document",
    "RankingConfig",
    "AgentOptions",
    "WordPressPost",
    "IndexedDocument",
    "ScoredResult",
    "SearchOptions",
    "SearchHit",
    "SearchResponse",
    "BackendHit",
    "IndexReport",
    "SearchError",
    "InputError",
    "DependencyUnavailableError",
    "IndexNotReadyError",
    "RefreshInProgressError",
    "DimensionMismatchError",
    "PostNotFoundError",
]
