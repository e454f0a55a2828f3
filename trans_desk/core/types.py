# trans_desk/core/types.py
"""
本模块定义了 Trans-Desk 系统的核心数据类型。
所有值对象都是不可变的 Pydantic 模型。
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Language(BaseModel):
    """一种语言。`code` 为空字符串时表示“自动检测”。相等性只比较 code。"""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str

    def __init__(self, code: str, name: str, **data: object) -> None:
        # 允许位置参数构造: Language("en", "English")
        super().__init__(code=code, name=name, **data)

    @property
    def is_auto(self) -> bool:
        return self.code == ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Language):
            return NotImplemented
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)


AUTO_LANGUAGE = Language("", "Auto")
DEFAULT_TARGET_LANGUAGE = Language("en", "English")


class Translation(BaseModel):
    """一次翻译的结果。译文为空字符串的实例代表“尚未翻译”或“已清空”。"""

    model_config = ConfigDict(frozen=True)

    translated_text: str = ""
    detected_language: Optional[str] = None
    transliterations: list[str] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "Translation":
        return cls(translated_text="")

    @property
    def is_empty(self) -> bool:
        return self.translated_text == ""


class TranslationRequest(BaseModel):
    """一次派发的工作单元，每次派发时重新创建，从不持久化。"""

    model_config = ConfigDict(frozen=True)

    text: str
    source_language: Language
    target_language: Language

    @property
    def source_code(self) -> str:
        return self.source_language.code

    @property
    def target_code(self) -> str:
        return self.target_language.code


class EngineSuccess(BaseModel):
    """代表一次成功的引擎调用。"""

    engine_name: str
    translation: Translation


class EngineFailure(BaseModel):
    """代表一次失败的引擎调用。"""

    engine_name: str
    error_message: str


EngineResult = Union[EngineSuccess, EngineFailure]


class HistoryItem(BaseModel):
    """一条已被接受的翻译历史记录，创建后不可变。"""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[int] = None
    source_language_code: str
    source_language_name: str
    target_language_code: str
    target_language_name: str
    inserted_text: str
    translated_text: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_request(
        cls, request: TranslationRequest, translation: Translation
    ) -> "HistoryItem":
        return cls(
            source_language_code=request.source_language.code,
            source_language_name=request.source_language.name,
            target_language_code=request.target_language.code,
            target_language_name=request.target_language.name,
            inserted_text=request.text,
            translated_text=translation.translated_text,
        )


class CoordinatorPhase(str, Enum):
    """协调器针对单个逻辑输入的状态机阶段。"""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
