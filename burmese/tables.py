"""동의어 / 발음 유사 자음 사전

코드 분기가 아닌 데이터로 유지한다. 교체가 필요하면 load_table로
JSON 파일({"키": ["대체어", ...]})을 읽어 VariantExpander에 넘긴다.
"""

import json
from pathlib import Path

# 표준어 -> 대체 표기 (키가 검색어에 포함되면 대체어로 치환한 변형 생성)
SYNONYMS: dict[str, list[str]] = {
    "မြန်မာ": ["ဗမာ", "မြန်မာနိုင်ငံ", "မြန်မာပြည်", "မြန်မာ့", "ဗမာ့", "ဗမာပြည်"],
    "ရန်ကုန်": ["ရန်ကုန်မြို့", "ရန်ကုန်တိုင်း", "ရန်ကုန်", "ရန်ကုန်မြို့တော်"],
    "မန္တလေး": ["မန္တလေးမြို့", "မန္တလေးတိုင်း", "မန္တလေး", "မန္တလေးမြို့တော်"],
    "နေပြည်တော်": ["နေပြည်တော်မြို့", "နေပြည်တော်ကောင်စီနယ်မြေ", "နေပြည်တော်", "နပိတော်"],
    "နိုင်ငံ": ["နိုင်ငံတော်", "နိုင်ငံ", "ပြည်", "ပြည်တော်"],
    "မြို့": ["မြို့တော်", "မြို့နယ်", "မြို့", "နယ်"],
    "အစိုးရ": ["နိုင်ငံတော်", "ပြည်ထောင်စု", "အစိုးရ", "အုပ်ချုပ်ရေး"],
    "ပညာ": ["ပညာရေး", "ပညာ", "သင်တန်း", "ပညာသင်ကြား"],
    "ကျန်းမာရေး": ["ကျန်းမာ", "ကုသ", "ဆေးကု", "ဆေးရုံ", "အထူးကု"],
    "စီးပွားရေး": ["စီးပွား", "စီးပွားကူး", "စီးပွားလုပ်ငန်း", "စီးပွားရေး", "ကုန်သွယ်ရေး"],
    "ယဉ်ကျေးမှု": ["ယဉ်ကျေး", "ဓလေ့", "ပြဿနာ", "ရိုးရာ", "ယဉ်ကျေးမှု"],
    "သတင်းစာ": ["သတင်း", "သတင်းစာ", "ဂျာနယ်", "မီဒီယာ"],
    "နည်းပညာ": ["နည်းပညာ", "သိပ္ပံ", "နည်းပညာဆိုင်ရာ", "နည်းပညာရေး"],
}

# 토큰 첫 글자 -> 구어 표기에서 혼동되는 자음
PHONETIC_SIMILARITY: dict[str, list[str]] = {
    "က": ["ခ"],
    "ဂ": ["ဃ"],
    "စ": ["ဆ"],
    "ဇ": ["ဈ"],
    "တ": ["ထ"],
    "ဒ": ["ဓ"],
    "န": ["ဏ"],
    "ပ": ["ဖ"],
    "ဗ": ["ဘ"],
    "မ": ["မ်"],
    "ယ": ["ရ"],
    "လ": ["ဠ"],
    "သ": ["ဿ"],
    "အ": ["အံ"],
}


def load_table(path: Path) -> dict[str, list[str]]:
    """JSON 사전 파일 로드

    Args:
        path: {"키": ["값", ...]} 형식의 JSON 파일

    Returns:
        키 -> 값 목록 매핑
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"사전 파일 형식이 잘못되었습니다: {path}")

    table: dict[str, list[str]] = {}
    for key, values in data.items():
        if isinstance(values, str):
            values = [values]
        table[str(key)] = [str(v) for v in values]
    return table
