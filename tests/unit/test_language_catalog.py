# tests/unit/test_language_catalog.py
"""针对 `LanguageCatalog` 的单元测试：获取、缓存与显示名称解析。"""

import pytest

from trans_desk.core import CatalogFetchError, Language
from trans_desk.languages import LanguageCatalog

from tests.helpers.fakes import DEFAULT_LANGUAGES, FakeEngine


@pytest.mark.asyncio
async def test_fetch_returns_ordered_languages_and_caches_them() -> None:
    engine = FakeEngine("primary")
    catalog = LanguageCatalog()

    first = await catalog.fetch(engine)
    second = await catalog.fetch(engine)

    assert first == DEFAULT_LANGUAGES
    assert second == DEFAULT_LANGUAGES
    assert engine.language_calls == 1
    assert catalog.languages == DEFAULT_LANGUAGES


@pytest.mark.asyncio
async def test_force_bypasses_cache() -> None:
    engine = FakeEngine("primary")
    catalog = LanguageCatalog()

    await catalog.fetch(engine)
    engine.languages = [Language("ja", "日本語")]
    refreshed = await catalog.fetch(engine, force=True)

    assert refreshed == [Language("ja", "日本語")]
    assert engine.language_calls == 2


@pytest.mark.asyncio
async def test_fetch_without_activate_keeps_current_catalog() -> None:
    primary = FakeEngine("primary")
    other = FakeEngine("other", languages=[Language("de", "German")])
    catalog = LanguageCatalog()
    await catalog.fetch(primary)

    assert await catalog.fetch(other, activate=False) == [Language("de", "German")]
    assert await catalog.fetch(other, activate=False) == [Language("de", "German")]

    assert other.language_calls == 1
    assert catalog.languages == DEFAULT_LANGUAGES
    assert catalog.resolve_display_name(Language("de", "x")).name == "Deutsch"


@pytest.mark.asyncio
async def test_fetch_failure_leaves_previous_list_untouched() -> None:
    engine = FakeEngine("primary")
    catalog = LanguageCatalog()
    await catalog.fetch(engine)

    engine.fail_languages = True
    with pytest.raises(CatalogFetchError, match="primary"):
        await catalog.fetch(engine, force=True)

    assert catalog.languages == DEFAULT_LANGUAGES
    assert await catalog.fetch(engine) == DEFAULT_LANGUAGES


@pytest.mark.asyncio
async def test_resolve_display_name_prefers_catalog_entry() -> None:
    catalog = LanguageCatalog()
    await catalog.fetch(FakeEngine("primary"))

    resolved = catalog.resolve_display_name(Language("es", "Spanish"))
    assert resolved.name == "Español"

    unknown = Language("xx", "Unknown")
    assert catalog.resolve_display_name(unknown) is unknown


def test_resolve_display_name_with_explicit_catalog() -> None:
    catalog = LanguageCatalog()
    entries = [Language("de", "Deutsch")]

    assert catalog.resolve_display_name(Language("de", "German"), entries).name == (
        "Deutsch"
    )
    assert catalog.resolve_display_name(Language("de", "German")).name == "German"


@pytest.mark.asyncio
async def test_localized_name_falls_back_to_langcodes() -> None:
    catalog = LanguageCatalog()
    await catalog.fetch(FakeEngine("primary"))

    assert catalog.localized_name("de") == "Deutsch"
    assert catalog.localized_name("fr") == "French"
    assert catalog.find("fr") is None
