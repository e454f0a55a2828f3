# trans_desk/engines/lingva.py
"""提供一个对接 Lingva Translate 前端实例的 HTTP 翻译引擎。"""

from typing import Optional
from urllib.parse import quote

import httpx
import structlog
from pydantic import Field

from trans_desk.core.exceptions import EngineError
from trans_desk.core.types import Language, Translation
from trans_desk.engines.base import BaseEngineConfig, BaseTranslationEngine

logger = structlog.get_logger(__name__)


class LingvaEngineConfig(BaseEngineConfig):
    """Lingva 引擎的配置。"""

    url: str = Field(default="https://lingva.ml")


class LingvaEngine(BaseTranslationEngine[LingvaEngineConfig]):
    """使用 Lingva REST API (`/api/v1/...`) 的纯异步引擎。"""

    CONFIG_MODEL = LingvaEngineConfig
    VERSION = "1.0.0"

    def __init__(
        self, config: LingvaEngineConfig, client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(config)
        self._client = client or httpx.AsyncClient(
            base_url=config.url.rstrip("/"), timeout=config.timeout
        )

    async def close(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()
        await super().close()

    async def _execute_translation(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        path = "/api/v1/{}/{}/{}".format(
            source_code or "auto", target_code, quote(text, safe="")
        )
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EngineError(f"Lingva 请求失败: {e}", engine_name=self.name) from e

        if "translation" not in data:
            raise EngineError(
                f"Lingva 返回了无法识别的响应: {data!r}", engine_name=self.name
            )
        info = data.get("info") or {}
        pronunciation = (info.get("pronunciation") or {}).get("translation")
        return Translation(
            translated_text=data["translation"],
            detected_language=info.get("detectedSource"),
            transliterations=[pronunciation] if pronunciation else [],
        )

    async def _fetch_languages(self) -> list[Language]:
        try:
            response = await self._client.get("/api/v1/languages/target")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EngineError(
                f"Lingva 语言列表获取失败: {e}", engine_name=self.name
            ) from e
        return [Language(item["code"], item["name"]) for item in data["languages"]]
