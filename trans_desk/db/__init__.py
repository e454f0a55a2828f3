"""数据库 ORM 模型包。"""

from .schema import Base, TdHistory, TdLanguageBookmark

__all__ = ["Base", "TdHistory", "TdLanguageBookmark"]
