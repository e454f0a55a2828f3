# trans_desk/__init__.py
"""Trans-Desk: 一个带防抖、多引擎同步翻译与去重历史记录的翻译请求协调器。"""

__version__ = "1.0.0"

from .config import TransDeskConfig
from .coordinator import CoordinatorState, TranslationCoordinator
from .core import HistoryItem, Language, Translation
from .engine_registry import EngineRegistry
from .history import HistoryStore
from .languages import LanguageCatalog
from .notifier import Notification, NotificationKind, Notifier

__all__ = [
    "__version__",
    "TranslationCoordinator",
    "CoordinatorState",
    "TransDeskConfig",
    "EngineRegistry",
    "HistoryStore",
    "LanguageCatalog",
    "Notifier",
    "Notification",
    "NotificationKind",
    "HistoryItem",
    "Language",
    "Translation",
]
