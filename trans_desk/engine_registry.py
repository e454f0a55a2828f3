# trans_desk/engine_registry.py
"""
本模块负责动态发现 `trans_desk.engines` 包下所有可用的翻译引擎类，
并提供按偏好索引选择主引擎与影子引擎的有序引擎目录。
"""

import importlib
import pkgutil
from collections.abc import Iterator, Sequence
from typing import Any, Dict, List

import structlog

from trans_desk.config import TransDeskConfig
from trans_desk.core.exceptions import ConfigurationError, EngineNotFoundError
from trans_desk.core.interfaces import TranslationEngine
from trans_desk.engines.base import BaseTranslationEngine

log = structlog.get_logger(__name__)
ENGINE_REGISTRY: Dict[str, type[BaseTranslationEngine[Any]]] = {}


def discover_engines() -> None:
    """
    动态发现 `trans_desk.engines` 包下的所有引擎并注册。

    此函数是幂等的，只在首次调用时执行发现操作。缺少可选依赖的引擎
    会被跳过并记录在摘要日志中。
    """
    if ENGINE_REGISTRY:
        return

    import trans_desk.engines

    successful_engines: List[str] = []
    skipped_engines: List[Dict[str, str]] = []

    for module_info in pkgutil.iter_modules(trans_desk.engines.__path__):
        module_name = module_info.name
        if module_name == "base" or module_name.startswith("_"):
            continue

        try:
            module = importlib.import_module(f"trans_desk.engines.{module_name}")
        except ImportError as e:
            skipped_engines.append(
                {"engine_name": module_name, "missing_dependency": str(e.name)}
            )
            continue

        for attr in vars(module).values():
            if (
                isinstance(attr, type)
                and issubclass(attr, BaseTranslationEngine)
                and attr is not BaseTranslationEngine
                and attr.__module__ == module.__name__
            ):
                engine_name = attr.__name__.replace("Engine", "").lower()
                ENGINE_REGISTRY[engine_name] = attr
                successful_engines.append(engine_name)

    log_payload: Dict[str, Any] = {"registered": sorted(successful_engines)}
    if skipped_engines:
        log_payload["skipped"] = skipped_engines
    log.info("引擎发现完成。", **log_payload)


def create_engine(spec: dict[str, Any]) -> BaseTranslationEngine[Any]:
    """根据一条 `{name, ...options}` 配置创建引擎实例。"""
    discover_engines()
    options = dict(spec)
    engine_name = options.pop("name")
    engine_class = ENGINE_REGISTRY.get(engine_name)
    if engine_class is None:
        raise EngineNotFoundError(f"引擎 '{engine_name}' 未在引擎注册表中找到。")
    try:
        engine_config = engine_class.CONFIG_MODEL(**options)
    except ValueError as e:
        raise ConfigurationError(f"引擎 '{engine_name}' 的配置无效: {e}") from e
    return engine_class(config=engine_config)


class EngineRegistry:
    """可用翻译引擎的有序目录。索引顺序即偏好设置中主引擎索引的含义。"""

    def __init__(self, engines: Sequence[TranslationEngine]):
        if not engines:
            raise ConfigurationError("引擎目录不能为空。")
        names = [engine.name for engine in engines]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"引擎名称必须唯一: {names}")
        self._engines: list[TranslationEngine] = list(engines)

    @classmethod
    def from_config(cls, config: TransDeskConfig) -> "EngineRegistry":
        return cls([create_engine(spec) for spec in config.engines])

    def __iter__(self) -> Iterator[TranslationEngine]:
        return iter(self._engines)

    def __len__(self) -> int:
        return len(self._engines)

    @property
    def names(self) -> list[str]:
        return [engine.name for engine in self._engines]

    def get(self, name: str) -> TranslationEngine:
        for engine in self._engines:
            if engine.name == name:
                return engine
        raise EngineNotFoundError(f"引擎 '{name}' 不在当前目录中。")

    def primary(self, index: int) -> TranslationEngine:
        """按索引返回主引擎；索引越界时回退到第一个引擎。"""
        if 0 <= index < len(self._engines):
            return self._engines[index]
        log.warning(
            "主引擎索引越界，回退到第一个引擎。",
            index=index,
            available=len(self._engines),
        )
        return self._engines[0]

    def shadow_engines(self) -> list[TranslationEngine]:
        """返回所有启用了同步翻译的引擎（可能包含主引擎，由调用方排除）。"""
        return [e for e in self._engines if e.is_simultaneous_translation_enabled()]

    async def initialize(self) -> None:
        for engine in self._engines:
            init = getattr(engine, "initialize", None)
            if init is not None:
                await init()

    async def close(self) -> None:
        for engine in self._engines:
            close = getattr(engine, "close", None)
            if close is None:
                continue
            try:
                await close()
            except Exception:
                log.warning("关闭引擎时出错", engine_name=engine.name, exc_info=True)
