# tests/integration/conftest.py
"""为集成测试提供基于临时 SQLite 文件数据库的 Fixtures。"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from trans_desk.config import TransDeskConfig
from trans_desk.persistence import SQLitePersistenceHandler, create_persistence_handler


@pytest.fixture
def test_config(tmp_path: Path) -> TransDeskConfig:
    """为每个测试生成一个指向独立临时数据库与偏好文件的配置。"""
    return TransDeskConfig(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path}/test.db",
        settings_path=str(tmp_path / "settings.json"),
        engines=[
            {"name": "debug", "translation_map": {"hello": "hola"}},
        ],
    )


@pytest_asyncio.fixture
async def handler(
    test_config: TransDeskConfig,
) -> AsyncGenerator[SQLitePersistenceHandler, None]:
    """提供一个已连接的持久化处理器，并确保测试结束后释放连接池。"""
    persistence = create_persistence_handler(test_config)
    await persistence.connect()
    yield persistence
    await persistence.close()
