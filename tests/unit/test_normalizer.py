"""
Unit tests for Burmese text normalization.
"""

import pytest

from burmese import clean_text, is_burmese, normalize_text

SAMPLES = [
    "မြန်မာနိုင်ငံ သတင်း",
    "  ရန်ကုန်မြို့\t\tခရီးသွား \n",
    "\u1000\u103A\u1037",
    "\u1000\u102F\u102D\u1036",
    "\u1000\u103E\u103C\u1031\u102C",
    "\u1000\u1031\u103B\u103D",
    "Hello\u200B World",
    "\u1025\u102E",
    "",
    "   ",
]


class TestCleanText:
    """Invisible character and whitespace cleanup"""

    def test_removes_zero_width_characters(self):
        assert clean_text("မြန်\u200Bမာ\uFEFF") == "မြန်မာ"

    def test_collapses_whitespace(self):
        assert clean_text("  a \t\n b  ") == "a b"

    def test_none_and_empty(self):
        assert clean_text(None) == ""
        assert clean_text("") == ""


class TestNormalizeText:
    """Canonical ordering of visually identical sequences"""

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        once = normalize_text(text)
        assert normalize_text(once) == once

    def test_reorders_dot_below_before_asat(self):
        assert normalize_text("\u1000\u103A\u1037") == "\u1000\u1037\u103A"

    def test_reorders_vowel_marks(self):
        assert normalize_text("\u1000\u102F\u102D") == "\u1000\u102D\u102F"

    def test_reorders_medials_and_e_vowel(self):
        # e 모음이 메디얼보다 앞에 저장된 경우
        assert normalize_text("\u1000\u1031\u103C") == "\u1000\u103C\u1031"
        # 메디얼 사이 순서 (ha가 ra 앞)
        assert normalize_text("\u1000\u103E\u103C") == "\u1000\u103C\u103E"

    def test_chained_rewrites_reach_fixpoint(self):
        assert normalize_text("\u1000\u1031\u103E\u103C") == "\u1000\u103C\u103E\u1031"

    def test_independent_vowel_composition(self):
        assert normalize_text("\u1025\u102E") == "\u1026"

    def test_already_canonical_text_unchanged(self):
        assert normalize_text("မြန်မာနိုင်ငံ") == "မြန်မာနိုင်ငံ"

    def test_latin_text_only_cleaned(self):
        assert normalize_text("  Hello   World ") == "Hello World"

    def test_empty(self):
        assert normalize_text("") == ""
        assert normalize_text(None) == ""


class TestIsBurmese:
    def test_detects_burmese(self):
        assert is_burmese("abc မြန်မာ")

    def test_latin_is_not_burmese(self):
        assert not is_burmese("Hello")
        assert not is_burmese("")
