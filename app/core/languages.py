"""
Catalog of languages a video can be detected in or translated to.

The table is fixed for the lifetime of the process.
"""

import enum
import locale
from types import MappingProxyType
from typing import List

from pydantic import BaseModel


class SupportedLanguage(str, enum.Enum):
    """ISO 639-1 codes accepted for detected and target languages."""
    EN = "en"
    ES = "es"
    FR = "fr"
    DE = "de"
    IT = "it"
    PT = "pt"
    RU = "ru"
    JA = "ja"
    KO = "ko"
    ZH = "zh"
    AR = "ar"
    HI = "hi"


LANGUAGE_NAMES = MappingProxyType({
    SupportedLanguage.EN: "English",
    SupportedLanguage.ES: "Spanish",
    SupportedLanguage.FR: "French",
    SupportedLanguage.DE: "German",
    SupportedLanguage.IT: "Italian",
    SupportedLanguage.PT: "Portuguese",
    SupportedLanguage.RU: "Russian",
    SupportedLanguage.JA: "Japanese",
    SupportedLanguage.KO: "Korean",
    SupportedLanguage.ZH: "Chinese",
    SupportedLanguage.AR: "Arabic",
    SupportedLanguage.HI: "Hindi",
})


class LanguageOption(BaseModel):
    """Schema for one entry of the language picker"""
    code: SupportedLanguage
    name: str


def is_supported(code: str) -> bool:
    """Return True if code is one of the supported language codes."""
    try:
        SupportedLanguage(code)
    except ValueError:
        return False
    return True


def list_languages() -> List[LanguageOption]:
    """
    Return every supported language, sorted by display name.

    Uses locale-aware collation so the order matches what users expect
    for their locale.
    """
    options = [LanguageOption(code=code, name=name) for code, name in LANGUAGE_NAMES.items()]
    options.sort(key=lambda option: (locale.strxfrm(option.name), option.name))
    return options
