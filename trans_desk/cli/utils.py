# trans_desk/cli/utils.py
"""提供 CLI 命令使用的共享工具函数。"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console

from trans_desk.bootstrap import create_coordinator
from trans_desk.config import TransDeskConfig
from trans_desk.coordinator import TranslationCoordinator
from trans_desk.core.exceptions import TransDeskError
from trans_desk.notifier import Notification, Notifier

_T = TypeVar("_T")

console = Console()


def print_notification(notification: Notification) -> None:
    detail = f" [dim]({notification.error})[/dim]" if notification.error else ""
    console.print(f"[yellow]⚠️ {notification.message}[/yellow]{detail}")


def run_with_coordinator(
    config: TransDeskConfig,
    action: Callable[[TranslationCoordinator], Awaitable[_T]],
) -> _T:
    """创建并初始化协调器，执行异步操作，最后无论成功与否都关闭协调器。"""
    notifier = Notifier()
    notifier.subscribe(print_notification)

    async def _runner() -> _T:
        coordinator = create_coordinator(config, notifier=notifier)
        try:
            await coordinator.initialize()
            return await action(coordinator)
        finally:
            await coordinator.close()

    try:
        return asyncio.run(_runner())
    except TransDeskError as e:
        console.print(f"[bold red]❌ 执行失败: {e}[/bold red]")
        raise typer.Exit(code=1) from e
