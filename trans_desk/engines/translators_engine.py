# trans_desk/engines/translators_engine.py
"""提供一个使用 `translators` 库的免费翻译引擎。"""

import asyncio
from typing import Any, Optional

import structlog
from pydantic import Field

from trans_desk.core.exceptions import EngineError
from trans_desk.core.types import Language, Translation
from trans_desk.engines.base import BaseEngineConfig, BaseTranslationEngine
from trans_desk.utils import language_from_code

logger = structlog.get_logger(__name__)


class TranslatorsEngineConfig(BaseEngineConfig):
    """Translators 引擎的配置。"""

    provider: str = "google"
    language_codes: list[str] = Field(
        default_factory=lambda: ["en", "de", "es", "fr", "it", "ja", "ko", "ru", "zh"]
    )


class TranslatorsEngine(BaseTranslationEngine[TranslatorsEngineConfig]):
    """一个使用 `translators` 库的异步引擎，阻塞调用在工作线程中执行。"""

    CONFIG_MODEL = TranslatorsEngineConfig
    VERSION = "1.0.0"

    def __init__(self, config: TranslatorsEngineConfig):
        super().__init__(config)
        self.ts_module: Optional[Any] = None
        logger.info("Translators 引擎已配置。", default_provider=self.config.provider)

    def _ensure_loaded(self) -> Any:
        if self.ts_module is None:
            logger.debug("正在惰性加载 'translators' 库...")
            try:
                import translators as ts
            except ImportError as e:
                raise EngineError(
                    "要使用 TranslatorsEngine, 请安装 'translators' 库: "
                    '"pip install "trans-desk[translators]"',
                    engine_name=self.name,
                ) from e
            self.ts_module = ts
        return self.ts_module

    async def _execute_translation(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        ts_lib = self._ensure_loaded()
        provider = self.config.provider

        def _translate_sync() -> str:
            return str(
                ts_lib.translate_text(
                    query_text=text,
                    translator=provider,
                    from_language=source_code or "auto",
                    to_language=target_code,
                    timeout=self.config.timeout,
                )
            )

        try:
            translated_text = await asyncio.to_thread(_translate_sync)
        except Exception as e:
            raise EngineError(
                f"Translators({provider}) Error: {e}", engine_name=self.name
            ) from e
        return Translation(translated_text=translated_text)

    async def _fetch_languages(self) -> list[Language]:
        return [language_from_code(code) for code in self.config.language_codes]
