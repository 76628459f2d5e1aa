"""검색 에러 분류"""


class SearchError(Exception):
    """검색 관련 에러 기본 클래스"""


class InputError(SearchError):
    """빈 검색어 등 잘못된 입력 (코어 진입 전 거부)"""


class DependencyUnavailableError(SearchError):
    """DB / 검색 백엔드 / AI 제공자 호출 실패"""

    def __init__(self, service: str, message: str = ""):
        self.service = service
        super().__init__(f"{service} 사용 불가: {message}" if message else f"{service} 사용 불가")


class IndexNotReadyError(SearchError):
    """인덱스 구축 전에 검색 호출"""


class RefreshInProgressError(SearchError):
    """이미 인덱스 갱신이 진행 중"""


class DimensionMismatchError(SearchError, ValueError):
    """벡터 차원 불일치"""

    def __init__(self, length1: int, length2: int):
        self.length1 = length1
        self.length2 = length2
        super().__init__(f"벡터 차원이 다릅니다: {length1} != {length2}")


class PostNotFoundError(InputError, LookupError):
    """존재하지 않거나 공개되지 않은 게시물"""
