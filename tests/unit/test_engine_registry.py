# tests/unit/test_engine_registry.py
"""针对引擎发现、创建与 `EngineRegistry` 选择逻辑的单元测试。"""

import pytest

from trans_desk.config import TransDeskConfig
from trans_desk.core import ConfigurationError, EngineNotFoundError
from trans_desk.engine_registry import (
    ENGINE_REGISTRY,
    EngineRegistry,
    create_engine,
    discover_engines,
)
from trans_desk.engines.debug import DebugEngine

from tests.helpers.fakes import FakeEngine


def test_discover_engines_registers_builtin_engines() -> None:
    discover_engines()

    assert ENGINE_REGISTRY["debug"] is DebugEngine
    assert "libretranslate" in ENGINE_REGISTRY
    assert "lingva" in ENGINE_REGISTRY
    assert "base" not in ENGINE_REGISTRY


def test_create_engine_applies_options() -> None:
    engine = create_engine({"name": "debug", "simultaneous": True})

    assert isinstance(engine, DebugEngine)
    assert engine.name == "debug"
    assert engine.is_simultaneous_translation_enabled() is True


def test_create_engine_rejects_unknown_name() -> None:
    with pytest.raises(EngineNotFoundError, match="nope"):
        create_engine({"name": "nope"})


def test_create_engine_rejects_invalid_options() -> None:
    with pytest.raises(ConfigurationError, match="debug"):
        create_engine({"name": "debug", "rpm": -1})


@pytest.mark.asyncio
async def test_registry_from_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(
        "TD_ENGINES", '[{"name": "debug"}, {"name": "libretranslate"}]'
    )
    registry = EngineRegistry.from_config(TransDeskConfig(_env_file=None))

    assert registry.names == ["debug", "libretranslate"]
    await registry.close()


def test_registry_rejects_empty_and_duplicate_engines() -> None:
    with pytest.raises(ConfigurationError):
        EngineRegistry([])
    with pytest.raises(ConfigurationError, match="唯一"):
        EngineRegistry([FakeEngine("a"), FakeEngine("a")])


def test_primary_selection_falls_back_to_first_engine() -> None:
    first, second = FakeEngine("first"), FakeEngine("second")
    registry = EngineRegistry([first, second])

    assert registry.primary(1) is second
    assert registry.primary(5) is first
    assert registry.primary(-1) is first


def test_lookup_by_name() -> None:
    first, second = FakeEngine("first"), FakeEngine("second")
    registry = EngineRegistry([first, second])

    assert registry.get("second") is second
    assert len(registry) == 2
    assert list(registry) == [first, second]
    with pytest.raises(EngineNotFoundError):
        registry.get("third")


def test_shadow_engines_are_those_with_simultaneous_enabled() -> None:
    first = FakeEngine("first", simultaneous=True)
    second = FakeEngine("second")
    third = FakeEngine("third", simultaneous=True)
    registry = EngineRegistry([first, second, third])

    assert registry.shadow_engines() == [first, third]


@pytest.mark.asyncio
async def test_initialize_and_close_engines() -> None:
    engine = create_engine({"name": "debug"})
    registry = EngineRegistry([engine, FakeEngine("fake")])

    await registry.initialize()
    assert engine.initialized is True

    await registry.close()
    assert engine.initialized is False
