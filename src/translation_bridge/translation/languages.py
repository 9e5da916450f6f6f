"""Language name → code table.

Clients name languages loosely: ISO-ish codes, English names, and names in
the language itself or in Chinese. ``get_language_code`` folds all of these
to the code the translation engine expects. The table is read-only and
shared by every request.
"""

from __future__ import annotations

# (code, aliases). Aliases are stored lower-case; every code is listed as its
# own alias so that a code always maps to itself.
LANGUAGES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("zh", ("中文（简体）", "simplified chinese", "simplified chinese language", "简体中文", "chinese", "zh")),
    (
        "zh-Hant",
        (
            "中文（繁体）",
            "traditional chinese",
            "traditional chinese (taiwan) language",
            "traditional chinese (hong kong) language",
            "繁體中文",
            "zh-hant",
        ),
    ),
    ("en", ("英语", "english", "english language", "en")),
    ("ja", ("日语", "japanese", "japanese language", "日本語", "ja")),
    ("ko", ("韩语", "korean", "korean language", "한국어", "ko")),
    ("de", ("德语", "german", "german language", "deutsch", "de")),
    ("fr", ("法语", "french", "french language", "français", "fr")),
    ("es", ("西班牙语", "spanish", "spanish language", "español", "es")),
    ("it", ("意大利语", "italian", "italian language", "italiano", "it")),
    ("pt", ("葡萄牙语", "portuguese", "portuguese language", "português", "pt")),
    ("ru", ("俄语", "russian", "russian language", "русский", "ru")),
    ("th", ("泰语", "thai", "thai language", "ไทย", "th")),
    ("vi", ("越南语", "vietnamese", "vietnamese language", "tiếng việt", "vi")),
    ("ar", ("阿拉伯语", "arabic", "arabic language", "العربية", "ar")),
    ("cs", ("捷克语", "czech", "czech language", "čeština", "cs")),
    ("da", ("丹麦语", "danish", "danish language", "dansk", "da")),
    ("fi", ("芬兰语", "finnish", "finnish language", "suomi", "fi")),
    ("hr", ("克罗地亚语", "croatian", "croatian language", "hrvatski", "hr")),
    ("hu", ("匈牙利语", "hungarian", "hungarian language", "magyar", "hu")),
    ("id", ("印尼语", "indonesian", "indonesian language", "bahasa indonesia", "id")),
    ("ms", ("马来语", "malay", "malay language", "bahasa melayu", "ms")),
    ("nb", ("挪威布克莫尔语", "norwegian bokmål", "norsk bokmål", "nb")),
    ("nl", ("荷兰语", "dutch", "dutch language", "nederlands", "nl")),
    ("pl", ("波兰语", "polish", "polish language", "polski", "pl")),
    ("ro", ("罗马尼亚语", "romanian", "romanian language", "română", "ro")),
    ("sv", ("瑞典语", "swedish", "swedish language", "svenska", "sv")),
    ("tr", ("土耳其语", "turkish", "turkish language", "türkçe", "tr")),
    ("uk", ("乌克兰语", "ukrainian", "ukrainian language", "українська", "uk")),
)

_ALIAS_TO_CODE: dict[str, str] = {
    alias: code for code, aliases in LANGUAGES for alias in aliases
}


def get_language_code(name: str) -> str:
    """Return the canonical code for a language name.

    Lookup is case-insensitive and ignores surrounding whitespace. Names not
    in the table are returned unchanged, so a code the table does not know
    still reaches the engine. Only an empty input yields an empty result.
    """
    if not name:
        return ""
    return _ALIAS_TO_CODE.get(name.strip().lower(), name)
