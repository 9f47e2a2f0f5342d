# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/7 05:41
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : DeepL REST API payloads
"""
from typing import List

from pydantic import BaseModel, Field


class TranslateRequest(BaseModel):
    text: List[str]
    source_lang: str | None = Field(default=None, description="Omit to let DeepL detect it")
    target_lang: str

    def dumps_params(self) -> dict:
        _payload = self.model_dump(mode="json", exclude_none=True)
        _payload["target_lang"] = self.target_lang.upper()
        if self.source_lang:
            _payload["source_lang"] = self.source_lang.upper()
        return _payload


class TranslationEntry(BaseModel):
    detected_source_language: str | None = Field(default=None)
    text: str


class TranslateResponse(BaseModel):
    translations: List[TranslationEntry] = Field(default_factory=list)


class DeepLUsage(BaseModel):
    character_count: int = 0
    character_limit: int = 0

    @property
    def remaining(self) -> int:
        return max(self.character_limit - self.character_count, 0)
