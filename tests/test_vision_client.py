# -*- coding: utf-8 -*-
"""
@Desc    : Tests for the Google Cloud Vision OCR client
"""
from unittest.mock import AsyncMock

import httpx
import pytest
from google.api_core.exceptions import PermissionDenied
from google.auth.exceptions import RefreshError
from google.cloud import vision

from models import FailureKind
from ocr.vision_client import VisionOCRClient

IMAGE_URL = "https://api.telegram.org/file/bot123:abc/photos/file_1.jpg"
IMAGE_BYTES = b"\x89PNG fake image"


def _http_client(status_code: int = 200) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == IMAGE_URL
        return httpx.Response(status_code, content=IMAGE_BYTES)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _annotator(response: vision.AnnotateImageResponse) -> AsyncMock:
    annotator = AsyncMock()
    annotator.batch_annotate_images = AsyncMock(
        return_value=vision.BatchAnnotateImagesResponse(responses=[response])
    )
    return annotator


@pytest.mark.asyncio
async def test_detect_text_returns_full_text_annotation():
    annotator = _annotator(
        vision.AnnotateImageResponse(
            full_text_annotation=vision.TextAnnotation(text="おはようございます\n")
        )
    )
    client = VisionOCRClient(_http_client(), annotator=annotator)

    result = await client.detect_text(IMAGE_URL)

    assert result.ok
    assert result.text == "おはようございます"

    request = annotator.batch_annotate_images.await_args.kwargs["requests"][0]
    assert request.image.content == IMAGE_BYTES
    assert request.features[0].type_ == vision.Feature.Type.TEXT_DETECTION


@pytest.mark.asyncio
async def test_detect_text_without_annotation_is_none():
    client = VisionOCRClient(_http_client(), annotator=_annotator(vision.AnnotateImageResponse()))

    result = await client.detect_text(IMAGE_URL)

    assert result.ok
    assert result.text is None


@pytest.mark.asyncio
async def test_detect_text_api_error_is_failure():
    response = vision.AnnotateImageResponse(error={"code": 3, "message": "Bad image data."})
    client = VisionOCRClient(_http_client(), annotator=_annotator(response))

    result = await client.detect_text(IMAGE_URL)

    assert not result.ok
    assert result.failure.kind == FailureKind.OCR
    assert "Bad image data." in result.failure.message


@pytest.mark.asyncio
async def test_detect_text_client_exception_is_failure():
    annotator = AsyncMock()
    annotator.batch_annotate_images = AsyncMock(side_effect=PermissionDenied("billing disabled"))
    client = VisionOCRClient(_http_client(), annotator=annotator)

    result = await client.detect_text(IMAGE_URL)

    assert not result.ok
    assert isinstance(result.failure.exception, PermissionDenied)


@pytest.mark.asyncio
async def test_detect_text_download_failure_skips_vision():
    annotator = AsyncMock()
    client = VisionOCRClient(_http_client(status_code=404), annotator=annotator)

    result = await client.detect_text(IMAGE_URL)

    assert not result.ok
    assert "download" in result.failure.message
    annotator.batch_annotate_images.assert_not_awaited()


@pytest.mark.asyncio
async def test_detect_text_auth_error_is_ocr_failure():
    annotator = AsyncMock()
    annotator.batch_annotate_images = AsyncMock(side_effect=RefreshError("invalid_grant"))
    client = VisionOCRClient(_http_client(), annotator=annotator)

    result = await client.detect_text(IMAGE_URL)

    assert not result.ok
    assert result.failure.kind == FailureKind.OCR
    assert isinstance(result.failure.exception, RefreshError)
