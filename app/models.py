# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/8 12:34
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Request-scoped values of a /translatejp invocation
"""

from enum import Enum

from pydantic import BaseModel, Field, ConfigDict


class TextSource(str, Enum):
    TEXT = "text"
    """
    用户在命令中直接给出了文本
    """

    IMAGE = "image"
    """
    仅附带图片，文本需要 OCR 提取
    """

    NONE = "none"
    """
    既没有文本也没有图片
    """


class ImageAttachment(BaseModel):
    file_id: str
    file_unique_id: str | None = None
    mime_type: str | None = Field(default=None, description="Only set for image documents")


class CommandInvocation(BaseModel):
    text: str | None = Field(default=None, description="Text after the command, stripped")
    image: ImageAttachment | None = None

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())

    @property
    def source(self) -> TextSource:
        # Raw text wins even when an image is attached as well
        if self.has_text:
            return TextSource.TEXT
        if self.image is not None:
            return TextSource.IMAGE
        return TextSource.NONE


class FailureKind(str, Enum):
    OCR = "ocr"
    TRANSLATION = "translation"
    PLATFORM = "platform"
    UNEXPECTED = "unexpected"


class ServiceFailure(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: FailureKind
    message: str
    exception: BaseException | None = Field(default=None, exclude=True)


class OCRResult(BaseModel):
    text: str | None = Field(default=None, description="Full text annotation, None if no text")
    failure: ServiceFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class TranslationResult(BaseModel):
    text: str = ""
    detected_source_language: str | None = None
    failure: ServiceFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class ReplyKind(str, Enum):
    PROMPT = "prompt"
    TRANSLATION = "translation"
    FAILURE = "failure"
