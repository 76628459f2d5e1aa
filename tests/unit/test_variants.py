"""
Unit tests for synonym / phonetic search variant generation.
"""

import json

import pytest

from burmese import (
    VariantExpander,
    create_search_variants,
    expand_synonyms,
    generate_phonetic_variants,
    load_table,
    normalize_text,
)


class TestExpandSynonyms:
    """Dictionary-driven substitution"""

    def test_substitutes_key_with_alternate(self):
        variants = expand_synonyms("မြန်မာနိုင်ငံ")
        assert variants[0] == "မြန်မာနိုင်ငံ"
        assert "ဗမာနိုင်ငံ" in variants

    def test_culture_alternates(self):
        variants = expand_synonyms("ယဉ်ကျေးမှု")
        assert {"ဓလေ့", "ပြဿနာ", "ရိုးရာ"} <= set(variants)

    def test_no_duplicates(self):
        variants = expand_synonyms("မြန်မာနိုင်ငံ")
        assert len(variants) == len(set(variants))

    def test_unknown_term_returns_itself(self):
        assert expand_synonyms("hello") == ["hello"]

    def test_empty(self):
        assert expand_synonyms("") == []

    def test_custom_table(self):
        expander = VariantExpander(synonyms={"cat": ["dog", "kitten"]}, phonetic={})
        assert expander.expand_synonyms("my cat") == ["my cat", "my dog", "my kitten"]


class TestPhoneticVariants:
    """First-character confusable substitution"""

    def test_replaces_first_character_of_token(self):
        assert "ခား" in generate_phonetic_variants("ကား")

    def test_only_first_character_changes(self):
        for variant in generate_phonetic_variants("ကောင်း"):
            assert variant[1:] == "ောင်း"

    def test_no_variants_for_latin(self):
        assert generate_phonetic_variants("hello") == []


class TestCreateSearchVariants:
    """Combined variant set"""

    @pytest.mark.parametrize("text", ["မြန်မာ", "  ရန်ကုန် ", "Python guide", "ကား"])
    def test_normalized_text_is_first(self, text):
        variants = create_search_variants(text)
        assert variants[0] == normalize_text(text)

    def test_includes_synonyms_and_tokens(self):
        variants = create_search_variants("မြန်မာ")
        assert "ဗမာ" in variants
        assert "မြန်" in variants
        assert "မာ" in variants

    def test_single_token_not_repeated(self):
        variants = create_search_variants("ကား")
        assert variants.count("ကား") == 1

    def test_empty(self):
        assert create_search_variants("") == []
        assert create_search_variants("   ") == []


class TestLoadTable:
    def test_loads_json_table(self, tmp_path):
        path = tmp_path / "synonyms.json"
        path.write_text(json.dumps({"cat": ["dog"], "bird": "parrot"}), encoding="utf-8")
        assert load_table(path) == {"cat": ["dog"], "bird": ["parrot"]}

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_table(path)
