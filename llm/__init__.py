"""LLM 모듈 (쿼리 확장, 요약)"""

from .client import FALLBACK_MODELS, LLMClient

__all__ = [
    "LLMClient",
    "FALLBACK_MODELS",
]
