from typing import List
from fastapi import APIRouter

from app.core.languages import LanguageOption, list_languages

router = APIRouter(tags=["Languages"])


@router.get("/getSupportedLanguages", response_model=List[LanguageOption])
def get_supported_languages():
    """Languages a video can be translated to, sorted by display name."""
    return list_languages()
