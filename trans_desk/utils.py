# trans_desk/utils.py
"""
本模块包含项目范围内的通用工具函数。
语言代码的校验与显示名称解析统一交给 `langcodes` 库。
"""

import re

from langcodes import Language as LangTag
from langcodes.tag_parser import LanguageTagError

from trans_desk.core.types import Language

# 语言子标签应该由 2-3 个字母组成 (BCP 47)
LANGUAGE_SUBTAG_PATTERN = re.compile(r"^[a-zA-Z]{2,3}$")


def validate_lang_code(code: str, allow_auto: bool = True) -> str:
    """校验单个语言代码是否符合 BCP 47 规范，返回原始代码。空字符串代表自动检测。"""
    if code == "":
        if allow_auto:
            return code
        raise ValueError("此处不允许使用自动检测语言。")
    try:
        tag = LangTag.get(code)
        if not tag.language or not LANGUAGE_SUBTAG_PATTERN.match(tag.language):
            raise LanguageTagError(
                f"Tag '{code}' lacks a valid 2-3 letter language subtag."
            )
    except LanguageTagError as e:
        raise ValueError(f"提供的语言代码 '{code}' 格式无效。原因: {e}") from e
    return code


def display_name_for(code: str) -> str:
    """返回语言代码的英文显示名称；无法解析时原样返回代码。"""
    if code == "":
        return "Auto"
    try:
        return str(LangTag.get(code).display_name())
    except (LanguageTagError, LookupError, ImportError):
        return code


def language_from_code(code: str) -> Language:
    return Language(code, display_name_for(code))
