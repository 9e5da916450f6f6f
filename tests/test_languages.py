"""Tests for the language name table."""

import pytest

from translation_bridge.translation.languages import LANGUAGES, get_language_code


@pytest.mark.unit
class TestGetLanguageCode:
    @pytest.mark.parametrize(
        "name, code",
        [
            ("English", "en"),
            ("english", "en"),
            ("  ENGLISH  ", "en"),
            ("英语", "en"),
            ("日本語", "ja"),
            ("Japanese", "ja"),
            ("简体中文", "zh"),
            ("Traditional Chinese", "zh-Hant"),
            ("繁體中文", "zh-Hant"),
            ("한국어", "ko"),
            ("Deutsch", "de"),
        ],
    )
    def test_known_names_map_to_codes(self, name, code):
        assert get_language_code(name) == code

    def test_every_code_maps_to_itself(self):
        for code, _aliases in LANGUAGES:
            assert get_language_code(code) == code

    def test_code_lookup_ignores_case(self):
        assert get_language_code("ZH-HANT") == "zh-Hant"

    def test_unknown_name_passes_through_unchanged(self):
        assert get_language_code("Klingon") == "Klingon"

    def test_unknown_name_keeps_original_whitespace(self):
        assert get_language_code(" tlh ") == " tlh "

    def test_empty_input_yields_empty(self):
        assert get_language_code("") == ""
