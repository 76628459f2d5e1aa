"""WordPress 데이터 소스 모듈"""

from .database import SUPPORTED_TABLES, WordPressDatabase

__all__ = [
    "WordPressDatabase",
    "SUPPORTED_TABLES",
]
