# trans_desk/engines/debug.py
"""提供一个用于开发和测试的调试翻译引擎。"""

from typing import Dict, Optional

from pydantic import Field

from trans_desk.core.exceptions import EngineError
from trans_desk.core.types import Language, Translation
from trans_desk.engines.base import BaseEngineConfig, BaseTranslationEngine

_DEFAULT_LANGUAGES = {
    "en": "English",
    "de": "German",
    "es": "Spanish",
    "fr": "French",
    "zh": "Chinese",
}


class DebugEngineConfig(BaseEngineConfig):
    """Debug 引擎的配置模型。"""

    mode: str = Field(default="SUCCESS", description="SUCCESS or FAIL")
    fail_on_text: Optional[str] = Field(default=None)
    fail_languages: bool = Field(default=False)
    translation_map: Dict[str, str] = Field(default_factory=dict)
    languages: Dict[str, str] = Field(default_factory=lambda: dict(_DEFAULT_LANGUAGES))


class DebugEngine(BaseTranslationEngine[DebugEngineConfig]):
    """一个简单的、确定性的调试翻译引擎实现。"""

    CONFIG_MODEL = DebugEngineConfig
    VERSION = "1.0.0"

    async def _execute_translation(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        if self.config.mode == "FAIL":
            raise EngineError("DebugEngine is in FAIL mode.", engine_name=self.name)

        if self.config.fail_on_text and text == self.config.fail_on_text:
            raise EngineError(
                f"模拟失败：检测到配置的文本 '{text}'", engine_name=self.name
            )

        translated_text = self.config.translation_map.get(
            text, f"Translated({text}) to {target_code}"
        )
        return Translation(
            translated_text=translated_text,
            detected_language=source_code or None,
        )

    async def _fetch_languages(self) -> list[Language]:
        if self.config.fail_languages:
            raise EngineError("DebugEngine 无法提供语言列表。", engine_name=self.name)
        return [Language(code, name) for code, name in self.config.languages.items()]
