"""버마어 텍스트 정규화"""

import re
from typing import Optional

# 제로폭 공백/결합자/비결합자, BOM
INVISIBLE_PATTERN = re.compile(r"[\u200B-\u200D\uFEFF]")
WHITESPACE_PATTERN = re.compile(r"\s+")

# 버마어 기본 블록 + 확장-A 블록
BURMESE_PATTERN = re.compile(r"[\u1000-\u109F\uAA60-\uAA7F]")

# 화면상 동일하지만 코드포인트 순서가 다른 시퀀스 -> 표준 순서
CANONICAL_SEQUENCES: dict[str, str] = {
    "\u103A\u1037": "\u1037\u103A",  # 아사트 + 아욱미 -> 아욱미 + 아사트
    "\u102F\u102D": "\u102D\u102F",  # u + i -> i + u
    "\u1036\u102F": "\u102F\u1036",  # 아누스바라 + u -> u + 아누스바라
    "\u1037\u102F": "\u102F\u1037",
    "\u1037\u1030": "\u1030\u1037",
    "\u1038\u1037": "\u1037\u1038",  # 비사르가는 항상 마지막
    # 메디얼 순서: ya, ra, wa, ha
    "\u103C\u103B": "\u103B\u103C",
    "\u103D\u103B": "\u103B\u103D",
    "\u103D\u103C": "\u103C\u103D",
    "\u103E\u103B": "\u103B\u103E",
    "\u103E\u103C": "\u103C\u103E",
    "\u103E\u103D": "\u103D\u103E",
    # e 모음은 메디얼 뒤에 저장
    "\u1031\u103B": "\u103B\u1031",
    "\u1031\u103C": "\u103C\u1031",
    "\u1031\u103D": "\u103D\u1031",
    "\u1031\u103E": "\u103E\u1031",
    "\u1025\u102E": "\u1026",  # 독립모음 u + ii -> uu
}


def clean_text(text: Optional[str]) -> str:
    """보이지 않는 문자 제거 + 공백 정리 (None/빈 문자열 -> "")"""
    if not text:
        return ""
    text = INVISIBLE_PATTERN.sub("", text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def _apply_canonical_sequences(text: str) -> str:
    # 재작성이 연쇄될 수 있으므로 고정점까지 반복 (교환마다 역순 쌍이 줄어 종료됨)
    while True:
        previous = text
        for variant, canonical in CANONICAL_SEQUENCES.items():
            if variant in text:
                text = text.replace(variant, canonical)
        if text == previous:
            break
    return text


def normalize_text(text: Optional[str]) -> str:
    """텍스트 정규화

    clean_text 후 결합 부호 시퀀스를 표준 순서로 통일한다.
    멱등: normalize_text(normalize_text(t)) == normalize_text(t)

    Args:
        text: 입력 텍스트

    Returns:
        정규화된 텍스트
    """
    cleaned = clean_text(text)
    if not is_burmese(cleaned):
        return cleaned
    return _apply_canonical_sequences(cleaned)


def is_burmese(text: Optional[str]) -> bool:
    """버마어 코드포인트를 하나라도 포함하는지"""
    if not text:
        return False
    return BURMESE_PATTERN.search(text) is not None
