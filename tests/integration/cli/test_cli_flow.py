# tests/integration/cli/test_cli_flow.py
"""端到端地测试 CLI 命令：真实的 debug 引擎、真实的临时 SQLite 文件数据库。"""

import json
from pathlib import Path

from pytest_mock import MockerFixture
from typer.testing import CliRunner

import trans_desk
from trans_desk.cli.main import app
from trans_desk.core import OcrExtractionError
from trans_desk.ocr import TesseractTextExtractor


def test_version(cli_runner: CliRunner, cli_env: Path) -> None:
    result = cli_runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert trans_desk.__version__ in result.stdout


def test_translate_then_list_history(cli_runner: CliRunner, cli_env: Path) -> None:
    result = cli_runner.invoke(app, ["translate", "hello", "--target", "de"])

    assert result.exit_code == 0, result.output
    assert "Translated(hello) to de" in result.stdout

    # 相同的请求在开启去重时不会产生第二条记录
    cli_runner.invoke(app, ["translate", "hello", "--target", "de"])

    history = cli_runner.invoke(app, ["history", "list"])
    assert history.exit_code == 0, history.output
    assert history.stdout.count("Translated(hello) to de") == 1


def test_translate_overrides_are_not_persisted(
    cli_runner: CliRunner, cli_env: Path
) -> None:
    result = cli_runner.invoke(app, ["translate", "hola", "-s", "es", "-t", "fr"])
    assert result.exit_code == 0, result.output

    settings_file = cli_env / "settings.json"
    if settings_file.exists():
        stored = json.loads(settings_file.read_text(encoding="utf-8"))
        assert "target_language" not in stored


def test_translate_rejects_invalid_target(cli_runner: CliRunner, cli_env: Path) -> None:
    result = cli_runner.invoke(app, ["translate", "hello", "--target", "german"])

    assert result.exit_code == 1
    assert "german" in result.stdout


def test_translate_with_unknown_engine_fails(
    cli_runner: CliRunner, cli_env: Path
) -> None:
    result = cli_runner.invoke(app, ["translate", "hello", "--engine", "missing"])

    assert result.exit_code == 1
    assert "missing" in result.stdout


def test_engines_and_languages(cli_runner: CliRunner, cli_env: Path) -> None:
    engines = cli_runner.invoke(app, ["engines"])
    assert engines.exit_code == 0, engines.output
    assert "debug" in engines.stdout

    languages = cli_runner.invoke(app, ["languages"])
    assert languages.exit_code == 0, languages.output
    assert "German" in languages.stdout


def test_history_clear(cli_runner: CliRunner, cli_env: Path) -> None:
    cli_runner.invoke(app, ["translate", "one", "-t", "de"])
    cli_runner.invoke(app, ["translate", "two", "-t", "de"])

    result = cli_runner.invoke(app, ["history", "clear", "--yes"])

    assert result.exit_code == 0, result.output
    assert "2" in result.stdout
    empty = cli_runner.invoke(app, ["history", "list"])
    assert "暂无历史记录" in empty.stdout


def test_ocr_command_translates_extracted_text(
    cli_runner: CliRunner, cli_env: Path, mocker: MockerFixture
) -> None:
    image = cli_env / "shot.png"
    image.write_bytes(b"not really a png")
    mocker.patch.object(TesseractTextExtractor, "is_ready", return_value=True)
    extract = mocker.patch.object(
        TesseractTextExtractor, "extract_text", return_value="hello"
    )

    result = cli_runner.invoke(app, ["ocr", str(image), "-t", "es"])

    assert result.exit_code == 0, result.output
    assert "Translated(hello) to es" in result.stdout
    extract.assert_called_once()


def test_ocr_command_reports_not_ready(
    cli_runner: CliRunner, cli_env: Path, mocker: MockerFixture
) -> None:
    image = cli_env / "shot.png"
    image.write_bytes(b"")
    mocker.patch.object(TesseractTextExtractor, "is_ready", return_value=False)

    result = cli_runner.invoke(app, ["ocr", str(image)])

    assert result.exit_code == 1
    assert "OCR" in result.stdout


def test_ocr_command_reports_unreadable_image(
    cli_runner: CliRunner, cli_env: Path, mocker: MockerFixture
) -> None:
    image = cli_env / "broken.png"
    image.write_bytes(b"not really a png")
    mocker.patch.object(TesseractTextExtractor, "is_ready", return_value=True)
    mocker.patch.object(
        TesseractTextExtractor,
        "extract_text",
        side_effect=OcrExtractionError("无法识别图像: cannot identify image file"),
    )

    result = cli_runner.invoke(app, ["ocr", str(image)])

    assert result.exit_code == 1
    assert "无法识别图像中的文字" in result.stdout
    assert "Traceback" not in result.stdout


def test_bookmark_and_unbookmark(cli_runner: CliRunner, cli_env: Path) -> None:
    added = cli_runner.invoke(app, ["bookmark", "de"])
    assert added.exit_code == 0, added.output
    assert "German" in added.stdout

    listed = cli_runner.invoke(app, ["languages"])
    assert "★" in listed.stdout

    removed = cli_runner.invoke(app, ["unbookmark", "de"])
    assert removed.exit_code == 0, removed.output
    assert "★" not in cli_runner.invoke(app, ["languages"]).stdout


def test_bookmark_rejects_invalid_code(cli_runner: CliRunner, cli_env: Path) -> None:
    result = cli_runner.invoke(app, ["bookmark", "german"])

    assert result.exit_code == 1
