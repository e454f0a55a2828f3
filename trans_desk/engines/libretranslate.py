# trans_desk/engines/libretranslate.py
"""提供一个对接 LibreTranslate 实例的 HTTP 翻译引擎。"""

from typing import Any, Optional

import httpx
import structlog
from pydantic import Field, SecretStr

from trans_desk.core.exceptions import EngineError
from trans_desk.core.types import Language, Translation
from trans_desk.engines.base import BaseEngineConfig, BaseTranslationEngine

logger = structlog.get_logger(__name__)


class LibreTranslateEngineConfig(BaseEngineConfig):
    """LibreTranslate 引擎的配置。"""

    url: str = Field(default="https://libretranslate.com")
    api_key: Optional[SecretStr] = None


class LibreTranslateEngine(BaseTranslationEngine[LibreTranslateEngineConfig]):
    """使用 LibreTranslate `/translate` 与 `/languages` 端点的纯异步引擎。"""

    CONFIG_MODEL = LibreTranslateEngineConfig
    VERSION = "1.0.0"

    def __init__(
        self,
        config: LibreTranslateEngineConfig,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(config)
        self._client = client or httpx.AsyncClient(
            base_url=config.url.rstrip("/"), timeout=config.timeout
        )

    async def close(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()
            logger.debug("LibreTranslate 客户端已关闭。", url=self.config.url)
        await super().close()

    def _with_key(self, payload: dict[str, Any]) -> dict[str, Any]:
        if self.config.api_key:
            payload["api_key"] = self.config.api_key.get_secret_value()
        return payload

    async def _execute_translation(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        payload = self._with_key(
            {
                "q": text,
                "source": source_code or "auto",
                "target": target_code,
                "format": "text",
            }
        )
        try:
            response = await self._client.post("/translate", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EngineError(f"LibreTranslate 请求失败: {e}", engine_name=self.name) from e

        if "translatedText" not in data:
            raise EngineError(
                f"LibreTranslate 返回了无法识别的响应: {data!r}", engine_name=self.name
            )
        detected = data.get("detectedLanguage") or {}
        return Translation(
            translated_text=data["translatedText"],
            detected_language=detected.get("language"),
        )

    async def _fetch_languages(self) -> list[Language]:
        try:
            response = await self._client.get("/languages")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EngineError(
                f"LibreTranslate 语言列表获取失败: {e}", engine_name=self.name
            ) from e
        return [Language(item["code"], item["name"]) for item in data]
