# trans_desk/debounce.py
"""单槽防抖定时器：每次重新布防都会替换（而不是累积）尚未触发的定时器。"""

import asyncio
from collections.abc import Callable
from typing import Generic, Optional, TypeVar

import structlog

_T = TypeVar("_T")

logger = structlog.get_logger(__name__)


class Debouncer(Generic[_T]):
    """
    在事件循环上运行的防抖器。

    `arm(value, delay)` 捕获当前值并安排一次触发；触发时若
    `current()` 仍等于捕获值，则调用 `on_fire(value)`，否则视为已被更新的输入取代。
    """

    def __init__(self, current: Callable[[], _T], on_fire: Callable[[_T], object]):
        self._current = current
        self._on_fire = on_fire
        self._handle: Optional[asyncio.TimerHandle] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, value: _T, delay: float) -> None:
        """以秒为单位的延迟重新布防。必须在事件循环线程中调用。"""
        self.cancel()
        self._generation += 1
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, self._generation, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, generation: int, captured: _T) -> None:
        if generation != self._generation:
            return
        self._handle = None
        if captured != self._current():
            logger.debug("防抖触发已被更新的输入取代")
            return
        self._on_fire(captured)
