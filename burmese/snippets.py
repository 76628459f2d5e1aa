"""결과 표시용 하이라이트 / 자르기"""

import re
from typing import Optional

from .variants import VariantExpander, default_expander


def truncate_content(content: Optional[str], max_length: int = 200) -> str:
    """max_length 이내로 자르고 마지막 공백까지 되돌린 뒤 '...' 추가

    "hello world foo", 11 -> "hello..."
    """
    if not content or len(content) <= max_length:
        return content or ""

    truncated = content[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        return truncated[:last_space] + "..."
    return truncated + "..."


def highlight_matches(
    text: Optional[str],
    search_term: Optional[str],
    pre_tag: str = "**",
    post_tag: str = "**",
    expander: Optional[VariantExpander] = None,
) -> str:
    """검색어의 모든 변형을 태그로 감싼다 (대소문자 무시)

    긴 변형부터 한 번에 치환하므로 태그가 중첩되지 않는다.
    """
    if not text or not search_term:
        return text or ""

    expander = expander or default_expander
    variants = sorted(expander.create_search_variants(search_term), key=len, reverse=True)
    if not variants:
        return text

    pattern = re.compile("|".join(re.escape(v) for v in variants), re.IGNORECASE)
    return pattern.sub(lambda m: f"{pre_tag}{m.group(0)}{post_tag}", text)
