"""HTTP API 모듈"""

from .app import create_app

__all__ = ["create_app"]
