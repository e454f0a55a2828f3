# trans_desk/history.py
"""本模块实现带去重功能的翻译历史记录存储。"""

import structlog

from trans_desk.core.exceptions import PersistenceError
from trans_desk.core.interfaces import HistoryRepository
from trans_desk.core.types import HistoryItem

logger = structlog.get_logger(__name__)


class HistoryStore:
    """
    在持久化仓库之上实现“是否记录”的策略。

    去重检查与插入不是原子的：并发的相同插入可能产生重复记录，这是可接受的。
    """

    def __init__(self, repository: HistoryRepository):
        self._repository = repository

    async def record_if_allowed(
        self, item: HistoryItem, dedup_enabled: bool, history_enabled: bool
    ) -> bool:
        """按偏好记录历史，返回是否真正插入了新记录。"""
        if not history_enabled:
            return False

        try:
            if dedup_enabled and await self._repository.exists_similar(
                item.inserted_text,
                item.source_language_code,
                item.target_language_code,
            ):
                logger.debug(
                    "已存在相似历史记录，跳过插入。",
                    source=item.source_language_code,
                    target=item.target_language_code,
                )
                return False
            await self._repository.insert(item)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"写入历史记录失败: {e}") from e
        return True

    async def list_recent(self, limit: int = 50) -> list[HistoryItem]:
        return await self._repository.list_recent(limit)

    async def delete(self, item_id: int) -> bool:
        return await self._repository.delete(item_id)

    async def clear(self) -> int:
        removed = await self._repository.clear()
        logger.info("历史记录已清空", removed=removed)
        return removed
