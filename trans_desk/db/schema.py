# trans_desk/db/schema.py
"""Trans-Desk 的 ORM 模型：翻译历史与收藏语言。"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """声明式基类。"""


class TdHistory(Base):
    """已接受的翻译历史记录。"""

    __tablename__ = "td_history"
    # 去重查询使用此索引；不设唯一约束，关闭去重时允许重复记录。
    __table_args__ = (
        Index(
            "ix_td_history_similar",
            "inserted_text",
            "source_language_code",
            "target_language_code",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_language_code: Mapped[str] = mapped_column(String, nullable=False)
    source_language_name: Mapped[str] = mapped_column(String, nullable=False)
    target_language_code: Mapped[str] = mapped_column(String, nullable=False)
    target_language_name: Mapped[str] = mapped_column(String, nullable=False)
    inserted_text: Mapped[str] = mapped_column(Text, nullable=False)
    translated_text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class TdLanguageBookmark(Base):
    """用户收藏的语言。"""

    __tablename__ = "td_language_bookmarks"

    code: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
