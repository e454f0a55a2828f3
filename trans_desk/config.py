# trans_desk/config.py
"""Trans-Desk 的应用级配置，通过环境变量（前缀 TD_）或 .env 文件加载。"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["json", "console"] = "console"


class OcrConfig(BaseModel):
    tesseract_cmd: Optional[str] = None
    tessdata_dir: Optional[str] = None
    languages: list[str] = Field(default_factory=lambda: ["eng"])


class TransDeskConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    database_url: str = "sqlite+aiosqlite:///transdesk.db"
    settings_path: Optional[str] = Field(
        default="transdesk-settings.json", description="用户偏好 JSON 文件路径"
    )
    engines: list[dict[str, Any]] = Field(
        default_factory=lambda: [{"name": "debug"}],
        description="按顺序排列的引擎配置，索引即偏好中的主引擎索引",
    )
    language_cache_ttl: int = Field(default=3600, gt=0)
    history_page_size: int = Field(default=50, gt=0)

    ocr: OcrConfig = Field(default_factory=OcrConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("engines")
    @classmethod
    def validate_engine_specs(cls, v: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not v:
            raise ValueError("至少需要配置一个翻译引擎。")
        for spec in v:
            if not spec.get("name"):
                raise ValueError(f"引擎配置缺少 'name' 字段: {spec!r}")
        return v

    @property
    def db_path(self) -> str:
        """从 sqlite URL 中提取数据库文件路径。"""
        if not self.database_url.startswith("sqlite"):
            raise ValueError("db_path 属性仅在 database_url 为 sqlite 类型时可用。")
        _, _, path = self.database_url.partition(":///")
        return path or ":memory:"
