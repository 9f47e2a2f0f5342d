# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/7 05:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : DeepL translation client
"""
from httpx import AsyncClient, AsyncBaseTransport, HTTPStatusError, HTTPError
from loguru import logger
from pydantic import ValidationError

from models import TranslationResult, ServiceFailure, FailureKind
from translator.models import TranslateRequest, TranslateResponse, DeepLUsage

DEEPL_STATUS_REASONS = {
    400: "bad request",
    403: "authorization failed, check DEEPL_API_KEY",
    404: "endpoint not found, check DEEPL_API_BASE_URL",
    413: "request too large",
    429: "too many requests",
    456: "character quota exceeded",
    503: "service temporarily unavailable",
}


class DeepLTranslator:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 60,
        transport: AsyncBaseTransport | None = None,
    ):
        headers = {"Authorization": f"DeepL-Auth-Key {api_key}"}
        self._client = AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout, transport=transport
        )

    async def translate(
        self, text: str, source_lang: str | None = "ja", target_lang: str = "en"
    ) -> TranslationResult:
        """
        翻译一段文本

        Service errors are returned as a failed TranslationResult instead of being raised.

        Args:
            text: source text, sent verbatim
            source_lang: language code of the source text, e.g. `ja`
            target_lang: language code to translate into, e.g. `en`

        Returns:

        """
        payload = TranslateRequest(text=[text], source_lang=source_lang, target_lang=target_lang)

        try:
            response = await self._client.post("/translate", json=payload.dumps_params())
            response.raise_for_status()
            result = TranslateResponse(**response.json())
        except HTTPStatusError as err:
            status_code = err.response.status_code
            reason = DEEPL_STATUS_REASONS.get(status_code, "unexpected status")
            return self._failed(f"DeepL responded {status_code} ({reason})", err)
        except HTTPError as err:
            return self._failed(f"DeepL request failed - {err!r}", err)
        except (ValueError, ValidationError) as err:
            return self._failed(f"DeepL returned an unreadable body - {err}", err)

        if not result.translations:
            return self._failed("DeepL returned no translations")

        entry = result.translations[0]
        logger.debug(
            f"DeepL translated {len(text)} chars "
            f"({entry.detected_source_language or source_lang} -> {target_lang})"
        )
        return TranslationResult(
            text=entry.text, detected_source_language=entry.detected_source_language
        )

    async def usage(self) -> DeepLUsage:
        """获取当前计费周期的字符用量"""
        response = await self._client.get("/usage")
        response.raise_for_status()
        return DeepLUsage(**response.json())

    async def aclose(self):
        await self._client.aclose()

    @staticmethod
    def _failed(message: str, exception: BaseException | None = None) -> TranslationResult:
        failure = ServiceFailure(kind=FailureKind.TRANSLATION, message=message, exception=exception)
        return TranslationResult(failure=failure)
