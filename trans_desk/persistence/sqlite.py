# trans_desk/persistence/sqlite.py
"""`HistoryRepository` 与 `BookmarkRepository` 协议的 SQLite 实现。"""
from __future__ import annotations

import structlog
from sqlalchemy import delete, exists, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from trans_desk.core.exceptions import PersistenceError
from trans_desk.core.types import HistoryItem, Language
from trans_desk.db.schema import Base, TdHistory, TdLanguageBookmark

logger = structlog.get_logger(__name__)


class SQLitePersistenceHandler:
    """基于 SQLAlchemy 异步会话与 aiosqlite 驱动的持久化处理器。"""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession], db_path: str):
        self._sessionmaker = sessionmaker
        self.db_path = db_path
        self.connected = False

    async def connect(self) -> None:
        """建立连接并确保表结构存在。"""
        if self.connected:
            return
        engine = self._sessionmaker.kw["bind"]
        try:
            async with engine.begin() as conn:
                await conn.execute(text("PRAGMA foreign_keys = ON;"))
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise PersistenceError(f"SQLite 数据库初始化失败: {e}") from e
        self.connected = True
        logger.info("SQLite 数据库连接已建立", db_path=self.db_path)

    async def close(self) -> None:
        """安全地关闭 SQLAlchemy 引擎及其底层连接池。"""
        engine = self._sessionmaker.kw.get("bind")
        if engine:
            await engine.dispose()
        self.connected = False
        logger.info("持久化层引擎已关闭。")

    # --- 历史记录 ---

    async def exists_similar(
        self, text: str, source_code: str, target_code: str
    ) -> bool:
        stmt = select(
            exists().where(
                TdHistory.inserted_text == text,
                TdHistory.source_language_code == source_code,
                TdHistory.target_language_code == target_code,
            )
        )
        try:
            async with self._sessionmaker() as session:
                return bool((await session.execute(stmt)).scalar())
        except SQLAlchemyError as e:
            raise PersistenceError(f"查询相似历史记录失败: {e}") from e

    async def insert(self, item: HistoryItem) -> HistoryItem:
        row = TdHistory(**item.model_dump(exclude={"id", "created_at"}))
        try:
            async with self._sessionmaker.begin() as session:
                session.add(row)
                await session.flush()
                await session.refresh(row)
                stored = HistoryItem.model_validate(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"插入历史记录失败: {e}") from e
        logger.debug("历史记录已插入", history_id=stored.id)
        return stored

    async def list_recent(self, limit: int = 50) -> list[HistoryItem]:
        stmt = select(TdHistory).order_by(TdHistory.id.desc()).limit(limit)
        try:
            async with self._sessionmaker() as session:
                rows = (await session.execute(stmt)).scalars().all()
                return [HistoryItem.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"读取历史记录失败: {e}") from e

    async def delete(self, item_id: int) -> bool:
        try:
            async with self._sessionmaker.begin() as session:
                result = await session.execute(
                    delete(TdHistory).where(TdHistory.id == item_id)
                )
                return bool(result.rowcount)
        except SQLAlchemyError as e:
            raise PersistenceError(f"删除历史记录失败: {e}") from e

    async def clear(self) -> int:
        try:
            async with self._sessionmaker.begin() as session:
                result = await session.execute(delete(TdHistory))
                return int(result.rowcount or 0)
        except SQLAlchemyError as e:
            raise PersistenceError(f"清空历史记录失败: {e}") from e

    # --- 收藏语言 ---

    async def get_bookmarked_languages(self) -> list[Language]:
        stmt = select(TdLanguageBookmark).order_by(
            TdLanguageBookmark.created_at, TdLanguageBookmark.code
        )
        try:
            async with self._sessionmaker() as session:
                rows = (await session.execute(stmt)).scalars().all()
                return [Language(row.code, row.name) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"读取收藏语言失败: {e}") from e

    async def add_bookmark(self, language: Language) -> None:
        try:
            async with self._sessionmaker.begin() as session:
                await session.execute(
                    insert(TdLanguageBookmark)
                    .values(code=language.code, name=language.name)
                    .prefix_with("OR IGNORE")
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"收藏语言失败: {e}") from e

    async def remove_bookmark(self, code: str) -> None:
        try:
            async with self._sessionmaker.begin() as session:
                await session.execute(
                    delete(TdLanguageBookmark).where(TdLanguageBookmark.code == code)
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"取消收藏语言失败: {e}") from e
