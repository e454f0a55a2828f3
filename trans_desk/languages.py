# trans_desk/languages.py
"""本模块维护从活动引擎获取的语言目录，并负责解析语言的显示名称。"""

from collections.abc import Sequence
from typing import Optional

import structlog
from cachetools import TTLCache

from trans_desk.core.exceptions import CatalogFetchError, EngineError
from trans_desk.core.interfaces import TranslationEngine
from trans_desk.core.types import Language
from trans_desk.utils import display_name_for

logger = structlog.get_logger(__name__)


class LanguageCatalog:
    """
    引擎支持的语言列表缓存。

    成功获取的列表按引擎名缓存在 TTLCache 中；获取失败时抛出
    `CatalogFetchError`，并且不会改动任何已缓存的内容。
    """

    def __init__(self, ttl: int = 3600, maxsize: int = 32):
        self._cache: TTLCache[str, list[Language]] = TTLCache(maxsize=maxsize, ttl=ttl)
        self._languages: list[Language] = []

    @property
    def languages(self) -> list[Language]:
        """最近一次成功获取的语言列表。"""
        return list(self._languages)

    async def fetch(
        self, engine: TranslationEngine, force: bool = False, activate: bool = True
    ) -> list[Language]:
        """
        异步返回引擎支持的有序语言列表。

        `activate` 为 False 时只查询（并缓存）该引擎的列表，不替换用于解析显示
        名称的当前目录，适用于查询非主引擎。
        """
        cached = None if force else self._cache.get(engine.name)
        if cached is not None:
            if activate:
                self._languages = cached
            return list(cached)

        try:
            languages = await engine.get_languages()
        except EngineError as e:
            logger.error("获取语言列表失败", engine_name=engine.name, error=str(e))
            raise CatalogFetchError(
                f"无法从引擎 '{engine.name}' 获取语言列表: {e}"
            ) from e

        self._cache[engine.name] = list(languages)
        if activate:
            self._languages = list(languages)
        logger.debug("语言列表已更新", engine_name=engine.name, count=len(languages))
        return list(languages)

    def find(self, code: str) -> Optional[Language]:
        return next((lang for lang in self._languages if lang.code == code), None)

    def resolve_display_name(
        self, language: Language, catalog: Optional[Sequence[Language]] = None
    ) -> Language:
        """若目录中存在相同 code 的条目则返回该条目，否则原样返回。从不失败。"""
        entries = self._languages if catalog is None else catalog
        return next((lang for lang in entries if lang.code == language.code), language)

    def localized_name(self, code: str) -> str:
        """目录中的名称优先，其次由 langcodes 推断。"""
        match = self.find(code)
        return match.name if match else display_name_for(code)
