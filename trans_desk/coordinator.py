# trans_desk/coordinator.py
"""本模块包含 Trans-Desk 的翻译请求协调器。"""
import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

import structlog

from trans_desk.core import (
    AUTO_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    CatalogFetchError,
    ConfigurationError,
    CoordinatorPhase,
    EngineError,
    EngineFailure,
    EngineResult,
    EngineSuccess,
    HistoryItem,
    ImageTextExtractor,
    Language,
    OcrExtractionError,
    OcrNotReadyError,
    PersistenceError,
    PersistenceHandler,
    SettingsKey,
    SettingsStore,
    Translation,
    TranslationEngine,
    TranslationRequest,
)
from trans_desk.debounce import Debouncer
from trans_desk.engine_registry import EngineRegistry
from trans_desk.history import HistoryStore
from trans_desk.languages import LanguageCatalog
from trans_desk.notifier import Notification, NotificationKind, Notifier
from trans_desk.settings import dump_language, load_language

logger = structlog.get_logger(__name__)


@dataclass
class CoordinatorState:
    """协调器独占的会话状态，只在事件循环线程上被修改。"""

    source_language: Language
    target_language: Language
    inserted_text: str = ""
    primary_translation: Translation = field(default_factory=Translation.empty)
    engine_results: dict[str, Translation] = field(default_factory=dict)
    translating: bool = False
    sim_enabled: bool = False
    enabled_shadow_engines: list[TranslationEngine] = field(default_factory=list)
    available_languages: list[Language] = field(default_factory=list)
    bookmarked_languages: list[Language] = field(default_factory=list)


class TranslationCoordinator:
    """
    交互式翻译的中心枢纽。

    负责输入防抖、向主引擎与影子引擎派发请求、按引擎聚合结果，以及把主引擎
    的成功结果写入历史记录。所有状态修改都发生在事件循环上；引擎调用、语言
    目录获取、历史写入与 OCR 都作为独立任务运行，后一次派发从不取消前一次。
    """

    def __init__(
        self,
        settings: SettingsStore,
        registry: EngineRegistry,
        persistence_handler: Optional[PersistenceHandler] = None,
        catalog: Optional[LanguageCatalog] = None,
        notifier: Optional[Notifier] = None,
        extractor: Optional[ImageTextExtractor] = None,
    ):
        self.settings = settings
        self.registry = registry
        self.handler = persistence_handler
        self.history = HistoryStore(persistence_handler) if persistence_handler else None
        self.catalog = catalog or LanguageCatalog()
        self.notifier = notifier or Notifier()
        self.extractor = extractor
        self.initialized = False

        self.engine: TranslationEngine = registry.primary(
            int(settings.get(SettingsKey.PRIMARY_ENGINE_INDEX, 0))
        )
        self.state = CoordinatorState(
            source_language=load_language(
                settings, SettingsKey.SOURCE_LANGUAGE, AUTO_LANGUAGE
            ),
            target_language=load_language(
                settings, SettingsKey.TARGET_LANGUAGE, DEFAULT_TARGET_LANGUAGE
            ),
            engine_results=self._empty_results(),
            sim_enabled=bool(
                settings.get(SettingsKey.SIMULTANEOUS_TRANSLATION, False)
            ),
            enabled_shadow_engines=registry.shadow_engines(),
        )

        self._debouncer: Debouncer[str] = Debouncer(
            current=lambda: self.state.inserted_text,
            on_fire=lambda _text: self.translate_now(),
        )
        self._active_tasks: set[asyncio.Task[Any]] = set()
        self._last_outcome: Optional[CoordinatorPhase] = None

    # --- 生命周期 ---

    async def initialize(self) -> None:
        """初始化协调器：连接持久化层、初始化引擎并加载语言目录。"""
        if self.initialized:
            return
        logger.info("协调器初始化开始...", primary_engine=self.engine.name)
        if self.handler is not None:
            await self.handler.connect()
        await self.registry.initialize()
        await self.refresh()
        self.initialized = True
        logger.info("协调器初始化完成。")

    async def close(self) -> None:
        """优雅地关闭协调器和所有相关资源。"""
        logger.info("开始优雅停机...")
        self._debouncer.cancel()
        if self._active_tasks:
            for task in list(self._active_tasks):
                task.cancel()
            await asyncio.gather(*self._active_tasks, return_exceptions=True)
        await self.registry.close()
        if self.handler is not None:
            await self.handler.close()
        self.initialized = False
        logger.info("优雅停机完成。")

    async def wait_until_idle(self) -> None:
        """等待所有已派发的任务（包括由它们派生的历史写入）完成。"""
        while self._active_tasks:
            await asyncio.gather(*list(self._active_tasks), return_exceptions=True)

    # --- 只读视图 ---

    @property
    def engine_results(self) -> Mapping[str, Translation]:
        return MappingProxyType(dict(self.state.engine_results))

    @property
    def phase(self) -> CoordinatorPhase:
        if self.state.translating:
            return CoordinatorPhase.DISPATCHING
        if self._debouncer.pending:
            return CoordinatorPhase.DEBOUNCING
        return self._last_outcome or CoordinatorPhase.IDLE

    # --- 输入与派发 ---

    def set_input(self, text: str) -> None:
        """替换输入文本；开启自动翻译时（重新）布防防抖定时器。"""
        self.state.inserted_text = text
        self._last_outcome = None
        if not self.settings.get(SettingsKey.TRANSLATE_AUTOMATICALLY, True):
            return
        delay_ms = float(self.settings.get(SettingsKey.FETCH_DELAY_MS, 500))
        self._debouncer.arm(text, delay_ms / 1000)

    def translate_now(self) -> Optional["asyncio.Task[EngineResult]"]:
        """
        立即派发当前输入，绕过防抖。

        输入为空或源语言等于目标语言时，主译文直接置为空译文且不调用任何引擎，
        返回 None；否则返回主引擎任务。必须在事件循环线程中调用。
        """
        state = self.state
        if not state.inserted_text or state.source_language == state.target_language:
            state.primary_translation = Translation.empty()
            return None

        request = TranslationRequest(
            text=state.inserted_text,
            source_language=state.source_language,
            target_language=state.target_language,
        )
        state.translating = True
        state.engine_results = self._empty_results()

        primary = self.engine
        logger.debug(
            "派发翻译请求",
            engine_name=primary.name,
            source=request.source_code,
            target=request.target_code,
        )
        primary_task = self._spawn(
            self._run_primary(primary, request), name=f"translate:{primary.name}"
        )

        if state.sim_enabled:
            for shadow in state.enabled_shadow_engines:
                if shadow.name != primary.name:
                    self._spawn(
                        self._run_shadow(shadow, request), name=f"shadow:{shadow.name}"
                    )
        return primary_task

    def clear(self) -> None:
        """同步重置输入、主译文与翻译中标志。不取消进行中的任务。"""
        self._debouncer.cancel()
        self.state.inserted_text = ""
        self.state.primary_translation = Translation.empty()
        self.state.translating = False
        self._last_outcome = None

    async def _call_engine(
        self, engine: TranslationEngine, request: TranslationRequest
    ) -> EngineResult:
        """调用引擎并把结果归一化为显式的成功/失败值。"""
        try:
            translation = await engine.translate(
                request.text, request.source_code, request.target_code
            )
        except EngineError as e:
            return EngineFailure(engine_name=engine.name, error_message=str(e))
        except Exception as e:
            logger.error("引擎抛出了未预期的异常", engine_name=engine.name, exc_info=True)
            return EngineFailure(
                engine_name=engine.name,
                error_message=f"{e.__class__.__name__}: {e}",
            )
        return EngineSuccess(engine_name=engine.name, translation=translation)

    async def _run_primary(
        self, engine: TranslationEngine, request: TranslationRequest
    ) -> EngineResult:
        result = await self._call_engine(engine, request)
        self.state.translating = False

        if isinstance(result, EngineFailure):
            self._last_outcome = CoordinatorPhase.FAILED
            logger.error(
                "主引擎翻译失败", engine_name=engine.name, error=result.error_message
            )
            self.notifier.notify(
                Notification(
                    kind=NotificationKind.ENGINE_UNREACHABLE,
                    message=f"翻译引擎 '{engine.name}' 不可用。",
                    error=result.error_message,
                )
            )
            return result

        # 输入可能在等待期间被清空
        if self.state.inserted_text:
            self.state.primary_translation = result.translation
            self.state.engine_results[engine.name] = result.translation
            self._last_outcome = CoordinatorPhase.SUCCEEDED
            self._spawn(
                self._save_to_history(request, result.translation), name="history"
            )
        return result

    async def _run_shadow(
        self, engine: TranslationEngine, request: TranslationRequest
    ) -> EngineResult:
        result = await self._call_engine(engine, request)
        if isinstance(result, EngineSuccess):
            self.state.engine_results[engine.name] = result.translation
        else:
            logger.debug(
                "影子引擎翻译失败，已忽略",
                engine_name=engine.name,
                error=result.error_message,
            )
        return result

    async def _save_to_history(
        self, request: TranslationRequest, translation: Translation
    ) -> None:
        if self.history is None:
            return
        resolved = TranslationRequest(
            text=request.text,
            source_language=self.catalog.resolve_display_name(request.source_language),
            target_language=self.catalog.resolve_display_name(request.target_language),
        )
        item = HistoryItem.from_request(resolved, translation)
        try:
            await self.history.record_if_allowed(
                item,
                dedup_enabled=bool(
                    self.settings.get(SettingsKey.SKIP_SIMILAR_HISTORY, True)
                ),
                history_enabled=bool(
                    self.settings.get(SettingsKey.HISTORY_ENABLED, True)
                ),
            )
        except PersistenceError:
            logger.error("保存历史记录失败", exc_info=True)

    # --- 设置与语言 ---

    async def refresh(self) -> bool:
        """从偏好重新读取引擎选择，并重新获取语言目录与收藏语言。返回语言目录是否获取成功。"""
        self.engine = self.registry.primary(
            int(self.settings.get(SettingsKey.PRIMARY_ENGINE_INDEX, 0))
        )
        self.state.enabled_shadow_engines = self.registry.shadow_engines()
        self.state.sim_enabled = bool(
            self.settings.get(SettingsKey.SIMULTANEOUS_TRANSLATION, False)
        )
        languages_ok = await self._fetch_languages()
        await self._fetch_bookmarked_languages()
        return languages_ok

    async def _fetch_languages(self) -> bool:
        try:
            languages = await self.catalog.fetch(self.engine, force=True)
        except CatalogFetchError as e:
            self.notifier.notify(
                Notification(
                    kind=NotificationKind.LANGUAGES_UNAVAILABLE,
                    message="无法获取语言列表。",
                    error=str(e),
                )
            )
            return False

        state = self.state
        state.available_languages = languages
        state.source_language = self.catalog.resolve_display_name(
            state.source_language, languages
        )
        state.target_language = self.catalog.resolve_display_name(
            state.target_language, languages
        )
        return True

    async def _fetch_bookmarked_languages(self) -> None:
        if self.handler is None:
            return
        try:
            self.state.bookmarked_languages = (
                await self.handler.get_bookmarked_languages()
            )
        except PersistenceError:
            logger.error("读取收藏语言失败", exc_info=True)

    async def bookmark_language(self, language: Language) -> None:
        """收藏一种语言并更新状态中的收藏列表。自动检测不能被收藏。"""
        if language.is_auto:
            raise ValueError("自动检测不能被收藏。")
        if self.handler is None:
            raise ConfigurationError("未配置持久化存储，无法收藏语言。")
        await self.handler.add_bookmark(self.catalog.resolve_display_name(language))
        await self._fetch_bookmarked_languages()

    async def unbookmark_language(self, code: str) -> None:
        if self.handler is None:
            raise ConfigurationError("未配置持久化存储，无法取消收藏。")
        await self.handler.remove_bookmark(code)
        await self._fetch_bookmarked_languages()

    def set_source_language(self, language: Language) -> None:
        self.state.source_language = language
        self.settings.set(SettingsKey.SOURCE_LANGUAGE, dump_language(language))

    def set_target_language(self, language: Language) -> None:
        if language.is_auto:
            raise ValueError("目标语言不能为自动检测。")
        self.state.target_language = language
        self.settings.set(SettingsKey.TARGET_LANGUAGE, dump_language(language))

    def swap_languages(self) -> bool:
        """交换源语言与目标语言。源语言为自动检测时拒绝交换并返回 False。"""
        source, target = self.state.source_language, self.state.target_language
        if source.is_auto:
            return False
        self.set_source_language(target)
        self.set_target_language(source)
        return True

    # --- 图像输入 ---

    async def process_image(
        self, image_ref: Any, context: Optional[Any] = None
    ) -> Optional[str]:
        """识别图像文字并立即翻译（绕过防抖）。返回识别出的文本。"""
        if self.extractor is None or not await asyncio.to_thread(
            self.extractor.is_ready, context
        ):
            self._notify_ocr_not_ready("OCR 尚未就绪，请先安装识别语言数据。")
            return None

        try:
            text = await asyncio.to_thread(
                self.extractor.extract_text, context, image_ref
            )
        except OcrNotReadyError as e:
            self._notify_ocr_not_ready(str(e))
            return None
        except Exception as e:
            if not isinstance(e, OcrExtractionError):
                logger.error("OCR 提取器抛出了未预期的异常", exc_info=True)
            self.notifier.notify(
                Notification(
                    kind=NotificationKind.OCR_FAILED,
                    message="无法识别图像中的文字。",
                    error=f"{e.__class__.__name__}: {e}",
                )
            )
            return None

        if text:
            self.state.inserted_text = text
            self.translate_now()
        return text

    def _notify_ocr_not_ready(self, message: str) -> None:
        self.notifier.notify(
            Notification(kind=NotificationKind.OCR_NOT_READY, message=message)
        )

    # --- 内部工具 ---

    def _empty_results(self) -> dict[str, Translation]:
        return {name: Translation.empty() for name in self.registry.names}

    def _spawn(
        self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None
    ) -> "asyncio.Task[Any]":
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._active_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: "asyncio.Task[Any]") -> None:
        self._active_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "后台任务异常结束",
                task_name=task.get_name(),
                exc_info=(type(exc), exc, exc.__traceback__),
            )
