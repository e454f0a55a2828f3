"""本模块作为持久化层的公共入口，导出核心组件。"""

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from trans_desk.config import TransDeskConfig
from trans_desk.core.exceptions import ConfigurationError

from .sqlite import SQLitePersistenceHandler


def create_persistence_handler(config: TransDeskConfig) -> SQLitePersistenceHandler:
    """
    根据配置创建并返回一个具体的持久化处理器实例。
    这是实例化持久化层的唯一入口。
    """
    db_url = config.database_url
    if not db_url.startswith("sqlite+aiosqlite"):
        raise ConfigurationError(
            f"不支持的数据库类型或驱动: '{db_url}'，请使用 'sqlite+aiosqlite:///...'"
        )

    engine = create_async_engine(db_url)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
    return SQLitePersistenceHandler(sessionmaker, db_path=config.db_path)


__all__ = ["create_persistence_handler", "SQLitePersistenceHandler"]
