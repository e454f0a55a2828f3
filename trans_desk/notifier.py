# trans_desk/notifier.py
"""
定义了协调器向宿主界面报告的用户可见事件，以及一个简单的订阅式分发器。
"""

from collections.abc import Callable
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict

logger = structlog.get_logger(__name__)


class NotificationKind(str, Enum):
    ENGINE_UNREACHABLE = "engine_unreachable"
    LANGUAGES_UNAVAILABLE = "languages_unavailable"
    OCR_NOT_READY = "ocr_not_ready"
    OCR_FAILED = "ocr_failed"


class Notification(BaseModel):
    """一条面向用户的失败通知。"""

    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    message: str
    error: Optional[str] = None


Subscriber = Callable[[Notification], None]


class Notifier:
    """把通知同步分发给所有订阅者。某个订阅者抛出的异常只记录日志，不影响其他订阅者。"""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """注册订阅者，返回用于取消订阅的函数。"""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def notify(self, notification: Notification) -> None:
        logger.info(
            "用户通知", kind=notification.kind.value, message=notification.message
        )
        for callback in list(self._subscribers):
            try:
                callback(notification)
            except Exception:
                logger.error(
                    "通知订阅者执行失败", kind=notification.kind.value, exc_info=True
                )
