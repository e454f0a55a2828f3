# trans_desk/bootstrap.py
"""根据应用配置组装一个完整的、尚未初始化的协调器。"""

from typing import Optional

from trans_desk.config import TransDeskConfig
from trans_desk.coordinator import TranslationCoordinator
from trans_desk.engine_registry import EngineRegistry
from trans_desk.languages import LanguageCatalog
from trans_desk.notifier import Notifier
from trans_desk.ocr import TesseractTextExtractor
from trans_desk.persistence import create_persistence_handler
from trans_desk.settings import JsonSettingsStore


def create_coordinator(
    config: TransDeskConfig, notifier: Optional[Notifier] = None
) -> TranslationCoordinator:
    """
    这是创建协调器的唯一入口，确保了各 CLI 命令中创建逻辑的一致性。

    Returns:
        一个未初始化的 TranslationCoordinator 实例，调用方负责 `initialize()` / `close()`。
    """
    return TranslationCoordinator(
        settings=JsonSettingsStore(config.settings_path),
        registry=EngineRegistry.from_config(config),
        persistence_handler=create_persistence_handler(config),
        catalog=LanguageCatalog(ttl=config.language_cache_ttl),
        notifier=notifier,
        extractor=TesseractTextExtractor(config.ocr),
    )
