# trans_desk/core/interfaces.py
"""
本模块使用 typing.Protocol 定义了协调器所依赖的各个协作者的接口协议。
协调器只依赖这些协议，不依赖任何具体实现。
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable

from trans_desk.core.types import HistoryItem, Language, Translation


@runtime_checkable
class TranslationEngine(Protocol):
    """翻译引擎必须满足的契约。失败时抛出 `EngineError`。"""

    @property
    def name(self) -> str: ...

    async def translate(
        self, text: str, source_code: str, target_code: str
    ) -> Translation: ...

    async def get_languages(self) -> list[Language]: ...

    def is_simultaneous_translation_enabled(self) -> bool: ...


class SettingsKey(str, Enum):
    """用户偏好设置的键。"""

    TRANSLATE_AUTOMATICALLY = "translate_automatically"
    FETCH_DELAY_MS = "fetch_delay_ms"
    PRIMARY_ENGINE_INDEX = "primary_engine_index"
    SIMULTANEOUS_TRANSLATION = "simultaneous_translation"
    HISTORY_ENABLED = "history_enabled"
    SKIP_SIMILAR_HISTORY = "skip_similar_history"
    SOURCE_LANGUAGE = "source_language"
    TARGET_LANGUAGE = "target_language"


class SettingsStore(Protocol):
    """带默认值的类型化键值偏好存储。"""

    def get(self, key: SettingsKey, default: Any = None) -> Any: ...

    def set(self, key: SettingsKey, value: Any) -> None: ...


class HistoryRepository(Protocol):
    """历史记录的持久化接口。"""

    async def exists_similar(
        self, text: str, source_code: str, target_code: str
    ) -> bool: ...

    async def insert(self, item: HistoryItem) -> HistoryItem: ...

    async def list_recent(self, limit: int = 50) -> list[HistoryItem]: ...

    async def delete(self, item_id: int) -> bool: ...

    async def clear(self) -> int: ...


class BookmarkRepository(Protocol):
    """收藏语言的持久化接口。"""

    async def get_bookmarked_languages(self) -> list[Language]: ...

    async def add_bookmark(self, language: Language) -> None: ...

    async def remove_bookmark(self, code: str) -> None: ...


class PersistenceHandler(HistoryRepository, BookmarkRepository, Protocol):
    """同时提供历史记录与收藏语言存储、并带有连接生命周期的持久化处理器。"""

    async def connect(self) -> None: ...

    async def close(self) -> None: ...


class ImageTextExtractor(Protocol):
    """图像文字识别能力。两个方法都是阻塞的，由调用方负责移出事件循环。"""

    def is_ready(self, context: Optional[Any] = None) -> bool: ...

    def extract_text(
        self, context: Optional[Any], image_ref: Any
    ) -> Optional[str]: ...
