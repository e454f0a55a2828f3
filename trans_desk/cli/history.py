# trans_desk/cli/history.py
"""查看与清理翻译历史的 CLI 命令。"""

from typing import Annotated, Optional

import questionary
import typer
from rich.table import Table

from trans_desk.cli.state import State
from trans_desk.cli.utils import console, run_with_coordinator
from trans_desk.coordinator import TranslationCoordinator
from trans_desk.core.exceptions import ConfigurationError
from trans_desk.history import HistoryStore

history_app = typer.Typer(help="查看和管理翻译历史")


def _require_history(coordinator: TranslationCoordinator) -> HistoryStore:
    if coordinator.history is None:
        raise ConfigurationError("未配置历史记录存储。")
    return coordinator.history


@history_app.command("list")
def history_list(
    ctx: typer.Context,
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-n", help="最多显示的记录数。")
    ] = None,
) -> None:
    """按时间倒序列出最近的翻译历史。"""
    state: State = ctx.obj
    page_size = limit or state.config.history_page_size

    async def _list(coordinator: TranslationCoordinator) -> None:
        items = await _require_history(coordinator).list_recent(page_size)
        if not items:
            console.print("[dim]暂无历史记录。[/dim]")
            return

        table = Table(title="翻译历史", show_header=True, header_style="bold cyan")
        table.add_column("ID", justify="right", style="dim")
        table.add_column("语言", style="cyan")
        table.add_column("原文")
        table.add_column("译文", style="green")
        for item in items:
            table.add_row(
                str(item.id),
                f"{item.source_language_name or 'Auto'} → {item.target_language_name}",
                item.inserted_text,
                item.translated_text,
            )
        console.print(table)

    run_with_coordinator(state.config, _list)


@history_app.command("clear")
def history_clear(
    ctx: typer.Context,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="跳过确认提示，直接清空。")
    ] = False,
) -> None:
    """清空全部翻译历史。"""
    state: State = ctx.obj
    if not yes and not questionary.confirm(
        "这是一个破坏性操作，是否清空全部历史记录？", default=False
    ).ask():
        console.print("[red]操作已取消。[/red]")
        raise typer.Exit()

    async def _clear(coordinator: TranslationCoordinator) -> int:
        return await _require_history(coordinator).clear()

    removed = run_with_coordinator(state.config, _clear)
    console.print(f"[bold green]✅ 已删除 {removed} 条历史记录。[/bold green]")
