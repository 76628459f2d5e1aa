"""
Unit tests for the Burmese syllable tokenizer.
"""

import pytest

from burmese import normalize_text, tokenize


class TestTokenizer:
    """Syllable segmentation"""

    def test_basic_syllables(self):
        assert tokenize("မြန်မာ") == ["မြန်", "မာ"]

    def test_killed_consonant_stays_with_syllable(self):
        assert tokenize("မြန်မာနိုင်ငံ") == ["မြန်", "မာ", "နိုင်", "ငံ"]

    def test_whitespace_is_discarded(self):
        assert tokenize("ရန်ကုန်မြို့ ခရီးသွား") == ["ရန်", "ကုန်", "မြို့", "ခ", "ရီး", "သွား"]

    def test_burmese_digits_grouped(self):
        assert tokenize("၂၀၂၄ ခုနှစ်")[0] == "၂၀၂၄"

    def test_latin_falls_back_to_characters(self):
        assert tokenize("abc ၁၂") == ["a", "b", "c", "၁၂"]

    @pytest.mark.parametrize(
        "text",
        [
            "မြန်မာနိုင်ငံ သတင်း",
            "ရန်ကုန်မြို့ ခရီးသွား",
            "Hello, မန္တလေး 2024!",
            "  ကျန်းမာရေး\tစီးပွားရေး ",
        ],
    )
    def test_tokens_cover_input(self, text):
        """Concatenated tokens reproduce the non-whitespace content"""
        expected = "".join(normalize_text(text).split())
        assert "".join(tokenize(text)) == expected

    def test_empty_input(self):
        assert tokenize("") == []
        assert tokenize("   ") == []
        assert tokenize(None) == []

    def test_input_is_normalized_first(self):
        assert tokenize("မြန်\u200Bမာ") == tokenize("မြန်မာ")
