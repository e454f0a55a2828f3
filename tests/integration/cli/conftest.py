# tests/integration/cli/conftest.py
"""为 CLI 集成测试提供 Fixtures。"""

from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """提供一个 Typer CliRunner 实例用于模拟命令行调用。"""
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """把数据库与偏好文件指向临时目录，并只启用 debug 引擎。"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TD_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/cli.db")
    monkeypatch.setenv("TD_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("TD_ENGINES", '[{"name": "debug"}]')
    monkeypatch.setenv("TD_LOGGING__LEVEL", "WARNING")
    return tmp_path
