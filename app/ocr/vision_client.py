# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/7 05:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Google Cloud Vision text detection
"""
from typing import Any, Dict

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import vision
from google.oauth2 import service_account
from httpx import AsyncClient, HTTPError
from loguru import logger

from models import OCRResult, ServiceFailure, FailureKind

# Vision API rejects inline images above 20 MB
MAX_IMAGE_BYTES = 20 * 1024 * 1024


class VisionOCRClient:
    def __init__(
        self,
        http_client: AsyncClient,
        annotator: vision.ImageAnnotatorAsyncClient | None = None,
        credentials: service_account.Credentials | None = None,
    ):
        self._http = http_client
        self._annotator = annotator
        self._credentials = credentials

    @classmethod
    def from_credentials_info(cls, info: Dict[str, Any], timeout: float = 75.0):
        credentials = service_account.Credentials.from_service_account_info(info)
        return cls(AsyncClient(timeout=timeout, follow_redirects=True), credentials=credentials)

    @property
    def annotator(self) -> vision.ImageAnnotatorAsyncClient:
        # grpc.aio channels bind to the event loop that is running when they are created
        if self._annotator is None:
            self._annotator = vision.ImageAnnotatorAsyncClient(credentials=self._credentials)
        return self._annotator

    async def detect_text(self, image_url: str) -> OCRResult:
        """
        识别图片中的文字

        The image is downloaded here and sent inline, Telegram file URLs carry the bot token.

        Args:
            image_url: fetchable image URL

        Returns:
            OCRResult with the full text annotation, `text=None` when nothing was detected

        """
        try:
            content = await self._download(image_url)
        except HTTPError as err:
            return self._failed(f"Failed to download image - {err!r}", err)

        if len(content) > MAX_IMAGE_BYTES:
            return self._failed(f"Image too large for text detection: {len(content)} bytes")

        request = vision.AnnotateImageRequest(
            image=vision.Image(content=content),
            features=[vision.Feature(type_=vision.Feature.Type.TEXT_DETECTION)],
        )
        try:
            batch = await self.annotator.batch_annotate_images(requests=[request])
        except (GoogleAPIError, GoogleAuthError) as err:
            return self._failed(f"Vision API call failed - {err}", err)

        if not batch.responses:
            return OCRResult(text=None)

        response = batch.responses[0]
        if response.error.message:
            return self._failed(f"Vision API error {response.error.code}: {response.error.message}")

        text = (response.full_text_annotation.text or "").strip()
        logger.debug(f"Vision detected {len(text)} chars")
        return OCRResult(text=text or None)

    async def _download(self, image_url: str) -> bytes:
        response = await self._http.get(image_url)
        response.raise_for_status()
        return response.content

    async def aclose(self):
        await self._http.aclose()
        if self._annotator is not None:
            await self._annotator.transport.close()

    @staticmethod
    def _failed(message: str, exception: BaseException | None = None) -> OCRResult:
        failure = ServiceFailure(kind=FailureKind.OCR, message=message, exception=exception)
        return OCRResult(failure=failure)
