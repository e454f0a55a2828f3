# trans_desk/engines/openai.py
"""提供一个使用 OpenAI 兼容 Chat Completions API 的翻译引擎。"""

import os
from typing import Any, cast

import httpx
import structlog
from pydantic import Field, HttpUrl, SecretStr, ValidationInfo, field_validator

from trans_desk.core.exceptions import ConfigurationError, EngineError
from trans_desk.core.types import Language, Translation
from trans_desk.engines.base import BaseEngineConfig, BaseTranslationEngine
from trans_desk.utils import display_name_for, language_from_code

_AsyncOpenAIClient: type | None = None
try:
    from openai import APIError, AsyncOpenAI

    _AsyncOpenAIClient = AsyncOpenAI
except ImportError:
    pass

logger = structlog.get_logger(__name__)


class OpenAIEngineConfig(BaseEngineConfig):
    """OpenAI 引擎的配置模型。未显式给出 api_key 时读取 TD_OPENAI_API_KEY。"""

    api_key: SecretStr | None = None
    endpoint: HttpUrl = Field(default=cast(HttpUrl, "https://api.openai.com/v1"))
    model: str = "gpt-4o-mini"
    temperature: float = 0.1
    prompt_template: str = (
        "Translate the following text from {source_lang} to {target_lang}. "
        "Return only the translated text, without any additional explanations "
        "or quotes.\n\n"
        'Text to translate: "{text}"'
    )
    max_retries: int = 2
    language_codes: list[str] = Field(
        default_factory=lambda: ["en", "de", "es", "fr", "it", "ja", "ko", "ru", "zh"]
    )

    @field_validator("endpoint", mode="before")
    @classmethod
    def _validate_endpoint(cls, v: Any, info: ValidationInfo) -> Any:
        if isinstance(v, str) and not v.strip():
            if info.field_name and info.field_name in cls.model_fields:
                return cls.model_fields[info.field_name].default
        return v


class OpenAIEngine(BaseTranslationEngine[OpenAIEngineConfig]):
    """使用 OpenAI API 的翻译引擎实现。"""

    CONFIG_MODEL = OpenAIEngineConfig
    VERSION = "1.0.0"

    def __init__(self, config: OpenAIEngineConfig):
        super().__init__(config)
        if _AsyncOpenAIClient is None:
            raise ImportError(
                "要使用 OpenAIEngine, 请安装 'openai' 库: "
                '"pip install "trans-desk[openai]"'
            )
        api_key = config.api_key or (
            SecretStr(os.environ["TD_OPENAI_API_KEY"])
            if os.environ.get("TD_OPENAI_API_KEY")
            else None
        )
        if api_key is None:
            raise ConfigurationError(
                "OpenAI 引擎配置错误: 缺少 API 密钥 (TD_OPENAI_API_KEY)。"
            )

        self.client = _AsyncOpenAIClient(
            api_key=api_key.get_secret_value(),
            base_url=str(config.endpoint),
            timeout=httpx.Timeout(config.timeout),
            max_retries=config.max_retries,
        )

    async def close(self) -> None:
        if not self.client.is_closed():
            await self.client.close()
            logger.info("OpenAI 引擎的 HTTP 客户端已成功关闭。")
        await super().close()

    async def _execute_translation(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        source_lang = (
            display_name_for(source_code) if source_code else "the detected language"
        )
        prompt = self.config.prompt_template.format(
            text=text, source_lang=source_lang, target_lang=display_name_for(target_code)
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.temperature,
            )
        except APIError as e:
            raise EngineError(f"OpenAI API Error: {e}", engine_name=self.name) from e

        if not response.choices:
            raise EngineError("API 返回了空的 'choices' 列表。", engine_name=self.name)

        content = response.choices[0].message.content or ""
        translated_text = content.strip().strip('"')
        if not translated_text:
            raise EngineError("API 返回了空内容。", engine_name=self.name)
        return Translation(translated_text=translated_text)

    async def _fetch_languages(self) -> list[Language]:
        return [language_from_code(code) for code in self.config.language_codes]
