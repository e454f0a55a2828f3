# tests/unit/engines/test_engine_functionality.py
"""
测试翻译引擎基类的核心功能（速率限制、并发控制、异常归一化）以及 Debug 引擎。
"""

import asyncio
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from pytest_mock import MockerFixture

from trans_desk.core import EngineError, Language, Translation, TranslationEngine
from trans_desk.engines.base import BaseEngineConfig, BaseTranslationEngine
from trans_desk.engines.debug import DebugEngine, DebugEngineConfig
from trans_desk.rate_limiter import RateLimiter


class _TestEngineConfig(BaseEngineConfig):
    """测试引擎配置模型。"""

    test_param: str = "default"


class _TestTranslationEngine(BaseTranslationEngine[_TestEngineConfig]):
    """用于测试的翻译引擎实现。"""

    CONFIG_MODEL = _TestEngineConfig
    VERSION = "1.0.0"

    async def _execute_translation(
        self, text: str, source_code: str, target_code: str
    ) -> Translation:
        await asyncio.sleep(0)  # 允许任务切换
        if "error" in text:
            raise EngineError("Simulated error", engine_name=self.name)
        if "crash" in text:
            raise KeyError("translatedText")
        return Translation(translated_text=f"{text} (translated to {target_code})")

    async def _fetch_languages(self) -> list[Language]:
        raise ConnectionError("offline")


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[_TestTranslationEngine, None]:
    """创建测试引擎实例并确保其在测试后关闭。"""
    engine = _TestTranslationEngine(_TestEngineConfig(rpm=600, max_concurrency=5))
    await engine.initialize()
    yield engine
    await engine.close()


def test_engine_satisfies_protocol_and_derives_name() -> None:
    engine = _TestTranslationEngine(_TestEngineConfig())

    assert isinstance(engine, TranslationEngine)
    assert engine.name == "_testtranslation"
    assert engine.is_simultaneous_translation_enabled() is False
    assert _TestTranslationEngine(
        _TestEngineConfig(simultaneous=True)
    ).is_simultaneous_translation_enabled()


@pytest.mark.asyncio
async def test_concurrency_control_limits_active_tasks(
    test_engine: _TestTranslationEngine,
) -> None:
    """测试并发控制功能（确定性测试）。"""
    test_engine._concurrency_semaphore = asyncio.Semaphore(2)
    active = 0
    peak = 0
    release = asyncio.Event()

    async def slow(text: str, source_code: str, target_code: str) -> Translation:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await release.wait()
        active -= 1
        return Translation(translated_text=text)

    test_engine._execute_translation = slow  # type: ignore[method-assign]
    tasks = [
        asyncio.create_task(test_engine.translate(f"t{i}", "", "de")) for i in range(5)
    ]
    for _ in range(5):
        await asyncio.sleep(0)
    assert peak == 2

    release.set()
    results = await asyncio.gather(*tasks)
    assert [r.translated_text for r in results] == [f"t{i}" for i in range(5)]
    assert peak == 2


@pytest.mark.asyncio
async def test_rate_limiter_is_consulted(
    test_engine: _TestTranslationEngine, mocker: MockerFixture
) -> None:
    assert isinstance(test_engine._rate_limiter, RateLimiter)
    acquire = mocker.patch.object(
        test_engine._rate_limiter, "acquire", new_callable=AsyncMock
    )

    await test_engine.translate("hello", "en", "de")

    acquire.assert_awaited_once()


@pytest.mark.asyncio
async def test_empty_target_is_rejected(test_engine: _TestTranslationEngine) -> None:
    with pytest.raises(EngineError, match="目标语言"):
        await test_engine.translate("hello", "en", "")


@pytest.mark.asyncio
async def test_engine_errors_pass_through(test_engine: _TestTranslationEngine) -> None:
    with pytest.raises(EngineError, match="Simulated error") as excinfo:
        await test_engine.translate("error", "", "de")
    assert excinfo.value.engine_name == "_testtranslation"


@pytest.mark.asyncio
async def test_unexpected_errors_are_normalized(
    test_engine: _TestTranslationEngine,
) -> None:
    with pytest.raises(EngineError, match="KeyError"):
        await test_engine.translate("crash", "", "de")
    with pytest.raises(EngineError, match="ConnectionError"):
        await test_engine.get_languages()


# --- Debug 引擎 ---


@pytest.mark.asyncio
async def test_debug_engine_default_and_mapped_translation() -> None:
    engine = DebugEngine(
        DebugEngineConfig(translation_map={"hello": "hola"})
    )

    mapped = await engine.translate("hello", "", "es")
    default = await engine.translate("bye", "en", "de")

    assert engine.name == "debug"
    assert mapped.translated_text == "hola"
    assert mapped.detected_language is None
    assert default.translated_text == "Translated(bye) to de"
    assert default.detected_language == "en"


@pytest.mark.asyncio
async def test_debug_engine_failure_modes() -> None:
    failing = DebugEngine(DebugEngineConfig(mode="FAIL"))
    with pytest.raises(EngineError, match="FAIL mode"):
        await failing.translate("hello", "", "de")

    picky = DebugEngine(DebugEngineConfig(fail_on_text="boom", fail_languages=True))
    assert (await picky.translate("fine", "", "de")).translated_text
    with pytest.raises(EngineError, match="boom"):
        await picky.translate("boom", "", "de")
    with pytest.raises(EngineError):
        await picky.get_languages()


@pytest.mark.asyncio
async def test_debug_engine_languages() -> None:
    engine = DebugEngine(DebugEngineConfig(languages={"en": "English", "ja": "日本語"}))

    languages = await engine.get_languages()

    assert languages == [Language("en", "English"), Language("ja", "日本語")]
