"""버마어 텍스트 처리 모듈"""

from .normalizer import clean_text, normalize_text, is_burmese
from .tokenizer import tokenize
from .tables import SYNONYMS, PHONETIC_SIMILARITY, load_table
from .variants import (
    VariantExpander,
    expand_synonyms,
    generate_phonetic_variants,
    create_search_variants,
)
from .similarity import SimilarityScorer, similarity
from .snippets import highlight_matches, truncate_content

__all__ = [
    "clean_text",
    "normalize_text",
    "is_burmese",
    "tokenize",
    "SYNONYMS",
    "PHONETIC_SIMILARITY",
    "load_table",
    "VariantExpander",
    "expand_synonyms",
    "generate_phonetic_variants",
    "create_search_variants",
    "SimilarityScorer",
    "similarity",
    "highlight_matches",
    "truncate_content",
]
