"""
本核心包定义了 Trans-Desk 系统中最基础、最稳定的构建块。

这里包含了系统的核心数据类型、接口协议和自定义异常，它们共同构成了
整个应用的“契约”。所有其他模块都依赖于此核心包，但本包不依赖于
项目中的任何其他模块。
"""

from .exceptions import (
    CatalogFetchError,
    ConfigurationError,
    EngineError,
    EngineNotFoundError,
    OcrExtractionError,
    OcrNotReadyError,
    PersistenceError,
    TransDeskError,
)
from .interfaces import (
    BookmarkRepository,
    HistoryRepository,
    ImageTextExtractor,
    PersistenceHandler,
    SettingsKey,
    SettingsStore,
    TranslationEngine,
)
from .types import (
    AUTO_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    CoordinatorPhase,
    EngineFailure,
    EngineResult,
    EngineSuccess,
    HistoryItem,
    Language,
    Translation,
    TranslationRequest,
)

__all__ = [
    # from exceptions.py
    "TransDeskError",
    "ConfigurationError",
    "EngineNotFoundError",
    "EngineError",
    "CatalogFetchError",
    "OcrExtractionError",
    "OcrNotReadyError",
    "PersistenceError",
    # from interfaces.py
    "TranslationEngine",
    "SettingsKey",
    "SettingsStore",
    "HistoryRepository",
    "BookmarkRepository",
    "ImageTextExtractor",
    "PersistenceHandler",
    # from types.py
    "AUTO_LANGUAGE",
    "DEFAULT_TARGET_LANGUAGE",
    "CoordinatorPhase",
    "EngineFailure",
    "EngineResult",
    "EngineSuccess",
    "HistoryItem",
    "Language",
    "Translation",
    "TranslationRequest",
]
