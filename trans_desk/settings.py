# trans_desk/settings.py
"""
本模块提供 `SettingsStore` 协议的默认实现：一个可选落盘为 JSON 文件的
类型化偏好存储，以及语言偏好的序列化辅助函数。
"""

import json
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from trans_desk.core.interfaces import SettingsKey, SettingsStore
from trans_desk.core.types import AUTO_LANGUAGE, DEFAULT_TARGET_LANGUAGE, Language

logger = structlog.get_logger(__name__)


def dump_language(language: Language) -> str:
    return language.model_dump_json()


SETTINGS_DEFAULTS: dict[SettingsKey, Any] = {
    SettingsKey.TRANSLATE_AUTOMATICALLY: True,
    SettingsKey.FETCH_DELAY_MS: 500,
    SettingsKey.PRIMARY_ENGINE_INDEX: 0,
    SettingsKey.SIMULTANEOUS_TRANSLATION: False,
    SettingsKey.HISTORY_ENABLED: True,
    SettingsKey.SKIP_SIMILAR_HISTORY: True,
    SettingsKey.SOURCE_LANGUAGE: dump_language(AUTO_LANGUAGE),
    SettingsKey.TARGET_LANGUAGE: dump_language(DEFAULT_TARGET_LANGUAGE),
}


def load_language(
    settings: SettingsStore, key: SettingsKey, fallback: Language
) -> Language:
    """从偏好中反序列化语言；缺失或损坏时返回 fallback。"""
    raw = settings.get(key)
    if not raw:
        return fallback
    try:
        return Language.model_validate_json(raw)
    except ValidationError:
        logger.warning("语言偏好已损坏，使用默认值。", key=key.value, raw=raw)
        return fallback


class JsonSettingsStore:
    """内存中的偏好存储；给定路径时每次写入都会同步落盘。"""

    def __init__(
        self,
        path: Optional[str | Path] = None,
        initial: Optional[dict[SettingsKey, Any]] = None,
    ):
        self._path = Path(path) if path else None
        self._values: dict[str, Any] = {}
        if self._path is not None and self._path.exists():
            self._load(self._path)
        for key, value in (initial or {}).items():
            self._values[SettingsKey(key).value] = value

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("偏好文件无法读取，已忽略。", path=str(path))
            return
        if isinstance(data, dict):
            self._values.update(data)

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(self._values, ensure_ascii=False, indent=2), encoding="utf-8"
        )

    def get(self, key: SettingsKey, default: Any = None) -> Any:
        key = SettingsKey(key)
        if key.value in self._values:
            return self._values[key.value]
        if default is not None:
            return default
        return SETTINGS_DEFAULTS.get(key)

    def set(self, key: SettingsKey, value: Any) -> None:
        key = SettingsKey(key)
        self._values[key.value] = value
        self._save()
        logger.debug("偏好已更新", key=key.value)

    def as_dict(self) -> dict[str, Any]:
        merged = {key.value: value for key, value in SETTINGS_DEFAULTS.items()}
        merged.update(self._values)
        return merged
