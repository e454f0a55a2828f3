# trans_desk/engines/base.py
"""
本模块定义了所有翻译引擎插件必须继承的抽象基类（ABC）。

基类实现了 `TranslationEngine` 协议：子类只需实现 `_execute_translation`
与 `_fetch_languages`，速率限制、并发控制与异常归一化由基类统一处理。
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import structlog
from pydantic import BaseModel, Field

from trans_desk.core.exceptions import EngineError
from trans_desk.core.types import Language, Translation
from trans_desk.rate_limiter import RateLimiter

_ConfigType = TypeVar("_ConfigType", bound="BaseEngineConfig")

logger = structlog.get_logger(__name__)


class BaseEngineConfig(BaseModel):
    """所有引擎配置模型的基类，提供了通用的速率、并发与同步翻译选项。"""

    rpm: int | None = Field(
        default=None, description="每分钟最大请求数 (Requests Per Minute)", gt=0
    )
    rps: int | None = Field(
        default=None, description="每秒最大请求数 (Requests Per Second)", gt=0
    )
    max_concurrency: int | None = Field(
        default=None, description="最大并发请求数", gt=0
    )
    simultaneous: bool = Field(
        default=False, description="是否参与同步（影子）翻译"
    )
    timeout: float = Field(default=15.0, description="单次请求超时（秒）", gt=0)


class BaseTranslationEngine(ABC, Generic[_ConfigType]):
    """翻译引擎的纯异步抽象基类，内置速率限制和并发控制。"""

    CONFIG_MODEL: type[_ConfigType]
    VERSION: str = "1.0.0"

    def __init__(self, config: _ConfigType):
        self.config = config
        self._rate_limiter: RateLimiter | None = None
        self._concurrency_semaphore: asyncio.Semaphore | None = None
        self.initialized: bool = False

        if config.rpm:
            self._rate_limiter = RateLimiter.per_minute(config.rpm)
        elif config.rps:
            self._rate_limiter = RateLimiter.per_second(config.rps)

        if config.max_concurrency:
            self._concurrency_semaphore = asyncio.Semaphore(config.max_concurrency)

    @property
    def name(self) -> str:
        """从类名自动推断引擎的名称。"""
        return self.__class__.__name__.replace("Engine", "").lower()

    def is_simultaneous_translation_enabled(self) -> bool:
        return self.config.simultaneous

    async def initialize(self) -> None:
        """引擎的异步初始化钩子，用于设置连接池等。"""
        self.initialized = True

    async def close(self) -> None:
        """引擎的异步关闭钩子，用于安全释放资源。"""
        self.initialized = False

    @abstractmethod
    async def _execute_translation(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        """[子类实现] 真正执行单次翻译的逻辑。`source_code` 为空表示自动检测。"""
        ...

    @abstractmethod
    async def _fetch_languages(self) -> list[Language]:
        """[子类实现] 获取引擎支持的语言列表。"""
        ...

    async def translate(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        """[模板方法] 执行单次翻译，应用并发和速率限制。"""
        if not target_code:
            raise EngineError("目标语言不能为自动检测。", engine_name=self.name)

        if self._rate_limiter:
            await self._rate_limiter.acquire()

        try:
            if self._concurrency_semaphore:
                async with self._concurrency_semaphore:
                    return await self._execute_translation(
                        text, source_code, target_code
                    )
            return await self._execute_translation(text, source_code, target_code)
        except EngineError:
            raise
        except Exception as e:
            logger.debug("引擎执行异常", engine_name=self.name, exc_info=True)
            raise EngineError(
                f"引擎执行异常: {e.__class__.__name__}: {e}", engine_name=self.name
            ) from e

    async def get_languages(self) -> list[Language]:
        try:
            return await self._fetch_languages()
        except EngineError:
            raise
        except Exception as e:
            raise EngineError(
                f"获取语言列表失败: {e.__class__.__name__}: {e}",
                engine_name=self.name,
            ) from e
