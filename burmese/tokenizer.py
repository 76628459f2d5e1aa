"""버마어 음절 토크나이저

버마어는 단어 경계가 없으므로 유니코드 범위 기반 음절 패턴으로 분리한다.

음절 = 선두 문자(자음/독립모음) + 결합 부호*
       + (자음 [아욱미] 아사트 + 결합 부호*)*   # 받침 자음 연결
폴백 = 버마 숫자 연속 | 공백이 아닌 임의의 한 글자
"""

import re
from functools import lru_cache
from typing import Optional

from .normalizer import normalize_text

CONSONANTS = "\u1000-\u1021"
LETTERS = "\u1000-\u102A\u103F\u1050-\u1055\uAA60-\uAA6F\uAA71-\uAA76\uAA7A"
COMBINING_MARKS = (
    "\u102B-\u103E\u1056-\u1059\u105E-\u1060\u1062-\u1064\u1067-\u106D"
    "\u1071-\u1074\u1082-\u108D\u108F\u109A-\u109D\uAA7B-\uAA7D"
)
DIGITS = "\u1040-\u1049"

# 스택 자음(비라마 + 자음)은 일반 결합 부호보다 먼저 시도
_MARKS = f"(?:\u1039[{CONSONANTS}]|[{COMBINING_MARKS}])*"
_KILLED_CONSONANT = f"[{CONSONANTS}]\u1037?\u103A"

SYLLABLE_PATTERN = re.compile(
    f"[{LETTERS}]{_MARKS}(?:{_KILLED_CONSONANT}{_MARKS})*"
    f"|[{DIGITS}]+"
    r"|\S"
)


@lru_cache(maxsize=4096)
def _tokenize_normalized(normalized: str) -> tuple[str, ...]:
    return tuple(SYLLABLE_PATTERN.findall(normalized))


def tokenize(text: Optional[str]) -> list[str]:
    """텍스트를 음절 토큰으로 분리

    Args:
        text: 입력 텍스트 (정규화 전이어도 됨)

    Returns:
        원문 순서대로의 토큰 목록 (빈 입력이면 [])

    Examples:
        >>> tokenize("မြန်မာ")
        ['မြန်', 'မာ']
    """
    normalized = normalize_text(text)
    if not normalized:
        return []
    return list(_tokenize_normalized(normalized))
