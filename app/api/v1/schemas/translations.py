# app/api/v1/schemas/translations.py
from typing import Any, Dict, List

from app.api.v1.schemas.base import CamelModel

LANGUAGE_CODE_PATTERN = r"^[a-z]{2}$"


class TranslationResponse(CamelModel):
    translations: Dict[str, Any]


class LanguagesResponse(CamelModel):
    languages: List[str]
