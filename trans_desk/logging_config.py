# trans_desk/logging_config.py
"""
本模块负责集中配置项目的日志系统。
控制台模式使用 Rich 渲染紧凑的单行日志，json 模式输出机器可读的日志。
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Literal

import structlog
from rich.console import Console
from rich.text import Text
from structlog.typing import Processor

APP_LOGGER_NAME = "trans_desk"


class CompactConsoleRenderer:
    """
    一个 structlog 处理器：把事件渲染为 “时间 级别 消息 key=value … (logger)” 形式的单行。
    过长的值会被截断，保持交互式会话中的日志简洁。
    """

    _LEVEL_STYLES = {
        "debug": ("blue", "DEBUG"),
        "info": ("green", "INFO"),
        "warning": ("yellow", "WARN"),
        "error": ("bold red", "ERROR"),
        "critical": ("bold magenta", "CRIT"),
    }

    def __init__(
        self,
        kv_truncate_at: int = 80,
        show_timestamp: bool = True,
        show_logger_name: bool = True,
        console: Console | None = None,
    ):
        self._console = console or Console(stderr=True)
        self._kv_truncate_at = kv_truncate_at
        self._show_timestamp = show_timestamp
        self._show_logger_name = show_logger_name

    def _format_value(self, value: Any) -> str:
        value_repr = value if isinstance(value, str) else repr(value)
        if len(value_repr) > self._kv_truncate_at:
            value_repr = value_repr[: self._kv_truncate_at - 1] + "…"
        return value_repr

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = str(event_dict.pop("event", "")).strip()
        timestamp = event_dict.pop("timestamp", "")
        level = str(event_dict.pop("level", name)).lower()
        logger_name = event_dict.pop("logger", "")
        exception = event_dict.pop("exception", None)
        style, level_text = self._LEVEL_STYLES.get(level, ("default", level.upper()))

        line = Text()
        if self._show_timestamp and timestamp:
            line.append(f"{timestamp} ", style="dim")
        line.append(f"{level_text:<5} ", style=style)
        line.append(event)
        for key, value in sorted(event_dict.items()):
            line.append(f" {key}=", style="dim")
            line.append(self._format_value(value), style="bright_white")
        if self._show_logger_name and logger_name:
            line.append(f" ({logger_name})", style="cyan dim")

        with self._console.capture() as capture:
            self._console.print(line, soft_wrap=True)
        rendered = capture.get().rstrip()
        if exception:
            rendered = f"{rendered}\n{exception}"
        return rendered


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    show_timestamp: bool = True,
    show_logger_name: bool = True,
    kv_truncate_at: int = 80,
) -> None:
    """
    配置全局的 structlog 日志系统。这是整个应用的日志配置入口。

    Args:
        log_level: 应用日志记录器的最低级别。
        log_format: 'console' 用于交互式使用，'json' 用于机器采集。
        show_timestamp: 控制台模式下是否显示时间戳。
        show_logger_name: 控制台模式下是否显示记录器名称。
        kv_truncate_at: 控制台模式下键值对中值的截断长度。
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "console":
        processors.insert(3, structlog.processors.TimeStamper(fmt="%H:%M:%S"))
        processors.append(
            CompactConsoleRenderer(
                kv_truncate_at=kv_truncate_at,
                show_timestamp=show_timestamp,
                show_logger_name=show_logger_name,
            )
        )
    else:
        processors.insert(3, structlog.processors.TimeStamper(fmt="iso", utc=True))
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # 标准 logging 作为最终输出端，消息已由 structlog 渲染完毕
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(log_level.upper())

    structlog.get_logger("trans_desk.logging_config").debug(
        "日志系统已配置完成。", log_format=log_format, app_log_level=log_level.upper()
    )
