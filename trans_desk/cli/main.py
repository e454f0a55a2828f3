# trans_desk/cli/main.py
"""Trans-Desk CLI 的主入口点。"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

import trans_desk
from trans_desk.cli.history import history_app
from trans_desk.cli.state import State
from trans_desk.cli.utils import console, run_with_coordinator
from trans_desk.config import TransDeskConfig
from trans_desk.coordinator import TranslationCoordinator
from trans_desk.engine_registry import discover_engines
from trans_desk.logging_config import setup_logging
from trans_desk.utils import language_from_code, validate_lang_code

app = typer.Typer(
    name="trans-desk",
    help="🌐 Trans-Desk: 带防抖、多引擎同步翻译与历史记录的翻译请求协调器。",
    add_completion=False,
    no_args_is_help=True,
)
app.add_typer(history_app, name="history")


def version_callback(value: bool) -> None:
    if value:
        console.print(f"Trans-Desk [bold cyan]v{trans_desk.__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="显示版本信息并退出。",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """主回调函数：先配置日志，再发现引擎，最后把配置放入上下文。"""
    try:
        config = TransDeskConfig()
        setup_logging(log_level=config.logging.level, log_format=config.logging.format)
        discover_engines()
        ctx.obj = State(config=config)
    except Exception as e:
        console.print("[bold red]❌ 启动失败：无法加载配置或初始化日志。[/bold red]")
        console.print(f"[dim]{e}[/dim]")
        raise typer.Exit(code=1) from e


def _apply_overrides(
    coordinator: TranslationCoordinator,
    source: Optional[str],
    target: Optional[str],
    engine: Optional[str],
    sim: bool,
) -> None:
    """仅对本次会话生效的覆盖，不写回偏好设置。"""
    if engine:
        coordinator.engine = coordinator.registry.get(engine)
    if sim:
        coordinator.state.sim_enabled = True
    catalog = coordinator.catalog
    if source is not None:
        coordinator.state.source_language = catalog.resolve_display_name(
            language_from_code(source)
        )
    if target is not None:
        coordinator.state.target_language = catalog.resolve_display_name(
            language_from_code(target)
        )


def _print_translation(coordinator: TranslationCoordinator) -> None:
    state = coordinator.state
    if state.primary_translation.is_empty:
        console.print("[yellow]没有可显示的译文。[/yellow]")
        return
    console.print(
        f"[dim]{state.source_language.name} → {state.target_language.name} "
        f"({coordinator.engine.name})[/dim]"
    )
    console.print(f"[bold green]{state.primary_translation.translated_text}[/bold green]")

    shadow_results = {
        name: translation
        for name, translation in coordinator.engine_results.items()
        if name != coordinator.engine.name and not translation.is_empty
    }
    if shadow_results:
        table = Table(title="同步翻译", show_header=True, header_style="bold cyan")
        table.add_column("引擎", style="cyan")
        table.add_column("译文")
        for name, translation in shadow_results.items():
            table.add_row(name, translation.translated_text)
        console.print(table)


@app.command("translate")
def translate(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="要翻译的文本。")],
    source: Annotated[
        Optional[str],
        typer.Option("--source", "-s", help="源语言代码，留空表示自动检测。"),
    ] = None,
    target: Annotated[
        Optional[str], typer.Option("--target", "-t", help="目标语言代码。")
    ] = None,
    engine: Annotated[
        Optional[str], typer.Option("--engine", "-e", help="本次使用的主引擎名称。")
    ] = None,
    sim: Annotated[
        bool, typer.Option("--sim", help="同时向所有启用同步翻译的引擎派发。")
    ] = False,
) -> None:
    """立即翻译一段文本并写入历史。"""
    state: State = ctx.obj
    try:
        if source is not None:
            validate_lang_code(source)
        if target is not None:
            validate_lang_code(target, allow_auto=False)
    except ValueError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(code=1) from e

    async def _translate(coordinator: TranslationCoordinator) -> None:
        _apply_overrides(coordinator, source, target, engine, sim)
        coordinator.state.inserted_text = text
        coordinator.translate_now()
        await coordinator.wait_until_idle()
        _print_translation(coordinator)

    run_with_coordinator(state.config, _translate)


@app.command("engines")
def engines(ctx: typer.Context) -> None:
    """列出已配置的翻译引擎。"""
    state: State = ctx.obj

    async def _engines(coordinator: TranslationCoordinator) -> None:
        table = Table(title="翻译引擎", show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("名称", style="cyan")
        table.add_column("主引擎", justify="center")
        table.add_column("同步翻译", justify="center")
        for index, eng in enumerate(coordinator.registry):
            table.add_row(
                str(index),
                eng.name,
                "✅" if eng.name == coordinator.engine.name else "",
                "✅" if eng.is_simultaneous_translation_enabled() else "",
            )
        console.print(table)

    run_with_coordinator(state.config, _engines)


@app.command("languages")
def languages(
    ctx: typer.Context,
    engine: Annotated[
        Optional[str], typer.Option("--engine", "-e", help="要查询的引擎名称。")
    ] = None,
) -> None:
    """列出引擎支持的语言。"""
    state: State = ctx.obj

    async def _languages(coordinator: TranslationCoordinator) -> None:
        target_engine = (
            coordinator.registry.get(engine) if engine else coordinator.engine
        )
        langs = await coordinator.catalog.fetch(
            target_engine, activate=target_engine is coordinator.engine
        )
        bookmarked = {lang.code for lang in coordinator.state.bookmarked_languages}
        table = Table(
            title=f"{target_engine.name} 支持的语言",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("代码", style="cyan")
        table.add_column("名称")
        table.add_column("收藏", justify="center")
        for lang in langs:
            table.add_row(lang.code, lang.name, "★" if lang.code in bookmarked else "")
        console.print(table)

    run_with_coordinator(state.config, _languages)


@app.command("ocr")
def ocr(
    ctx: typer.Context,
    image: Annotated[
        Path, typer.Argument(exists=True, dir_okay=False, help="要识别的图片文件。")
    ],
    target: Annotated[
        Optional[str], typer.Option("--target", "-t", help="目标语言代码。")
    ] = None,
) -> None:
    """识别图片中的文字并立即翻译。"""
    state: State = ctx.obj

    async def _ocr(coordinator: TranslationCoordinator) -> None:
        _apply_overrides(coordinator, None, target, None, False)
        text = await coordinator.process_image(image)
        if text is None:
            raise typer.Exit(code=1)
        console.print(f"[dim]识别结果:[/dim] {text}")
        await coordinator.wait_until_idle()
        _print_translation(coordinator)

    run_with_coordinator(state.config, _ocr)


def _parse_bookmark_code(code: str) -> str:
    try:
        return validate_lang_code(code, allow_auto=False)
    except ValueError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(code=1) from e


@app.command("bookmark")
def bookmark(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="要收藏的语言代码。")],
) -> None:
    """收藏一种语言。"""
    state: State = ctx.obj
    code = _parse_bookmark_code(code)

    async def _bookmark(coordinator: TranslationCoordinator) -> None:
        await coordinator.bookmark_language(language_from_code(code))
        names = ", ".join(lang.name for lang in coordinator.state.bookmarked_languages)
        console.print(f"[bold green]✅ 已收藏。[/bold green] [dim]{names}[/dim]")

    run_with_coordinator(state.config, _bookmark)


@app.command("unbookmark")
def unbookmark(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="要取消收藏的语言代码。")],
) -> None:
    """取消收藏一种语言。"""
    state: State = ctx.obj
    code = _parse_bookmark_code(code)

    async def _unbookmark(coordinator: TranslationCoordinator) -> None:
        await coordinator.unbookmark_language(code)
        console.print("[bold green]✅ 已取消收藏。[/bold green]")

    run_with_coordinator(state.config, _unbookmark)
