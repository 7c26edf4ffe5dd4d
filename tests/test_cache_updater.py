"""Tests for vashwatch.cache.updater — the JSON template cache."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from vashwatch._errors import CacheError
from vashwatch.cache.updater import (
    CacheUpdateParams,
    JsonTemplateCache,
    read_cache,
    write_cache,
)
from vashwatch.config import WatchConfig


def _params(
    config: WatchConfig,
    module_name: str = "about",
    file_name: str = "Index.vash",
    content: bytes | None = None,
) -> CacheUpdateParams:
    return CacheUpdateParams(
        type="pg",
        name=f"pg_{module_name}/{Path(file_name).stem}",
        template_path=config.template_path("pg", module_name, file_name),
        content=content,
        models_path=config.models_path,
        cache_dest=config.cache_path,
        debug_mode=config.debug_mode,
    )


class TestReadWriteCache:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert read_cache(tmp_path / "nope.json") == {}

    def test_round_trip_creates_parent(self, tmp_path: Path) -> None:
        dest = tmp_path / "dist" / "cache.json"
        write_cache(dest, {"pg_about/Index": "<h1>About</h1>"})
        assert read_cache(dest) == {"pg_about/Index": "<h1>About</h1>"}
        assert not (dest.parent / ".cache.json.tmp").exists()

    def test_invalid_json(self, tmp_path: Path) -> None:
        dest = tmp_path / "cache.json"
        dest.write_text("{not json")
        with pytest.raises(CacheError, match="not valid JSON"):
            read_cache(dest)

    def test_non_object(self, tmp_path: Path) -> None:
        dest = tmp_path / "cache.json"
        dest.write_text("[1, 2]")
        with pytest.raises(CacheError, match="JSON object"):
            read_cache(dest)


class TestUpdate:
    """JsonTemplateCache.update refreshes one entry."""

    @pytest.mark.asyncio
    async def test_in_memory_content(self, config: WatchConfig) -> None:
        cache = JsonTemplateCache()
        result = await cache.update(_params(config, content=b"<h1>Edited</h1>"))

        assert result.success
        assert result.name == "pg_about/Index"
        assert read_cache(config.cache_path) == {"pg_about/Index": "<h1>Edited</h1>"}

    @pytest.mark.asyncio
    async def test_reads_from_disk_when_no_content(self, config: WatchConfig) -> None:
        cache = JsonTemplateCache()
        result = await cache.update(_params(config, file_name="Contact.vash"))

        assert result.success
        assert read_cache(config.cache_path)["pg_about/Contact"] == "<h1>Contact</h1>\n"

    @pytest.mark.asyncio
    async def test_keeps_other_entries(self, config: WatchConfig) -> None:
        write_cache(config.cache_path, {"wg_Nav/Index": "<nav></nav>"})
        await JsonTemplateCache().update(_params(config, content=b"x"))

        assert read_cache(config.cache_path) == {
            "pg_about/Index": "x",
            "wg_Nav/Index": "<nav></nav>",
        }

    @pytest.mark.asyncio
    async def test_compile_hook(self, config: WatchConfig) -> None:
        seen: list[CacheUpdateParams] = []

        def compile_(source: str, params: CacheUpdateParams) -> str:
            seen.append(params)
            return f"compiled({source.strip()})"

        await JsonTemplateCache(compile=compile_).update(_params(config, content=b" a "))

        assert read_cache(config.cache_path) == {"pg_about/Index": "compiled(a)"}
        assert seen[0].models_path == config.models_path

    @pytest.mark.asyncio
    async def test_missing_template_fails(self, config: WatchConfig) -> None:
        result = await JsonTemplateCache().update(_params(config, module_name="nowhere"))

        assert not result.success
        assert "Could not read template" in result.message
        assert not config.cache_path.exists()

    @pytest.mark.asyncio
    async def test_compile_error_fails(self, config: WatchConfig) -> None:
        def broken(source: str, params: CacheUpdateParams) -> str:
            msg = "unexpected '}'"
            raise SyntaxError(msg)

        result = await JsonTemplateCache(compile=broken).update(_params(config, content=b"x"))

        assert not result.success
        assert "unexpected" in result.message

    @pytest.mark.asyncio
    async def test_corrupt_cache_fails(self, config: WatchConfig) -> None:
        config.cache_path.parent.mkdir(parents=True)
        config.cache_path.write_text("{oops")

        result = await JsonTemplateCache().update(_params(config, content=b"x"))

        assert not result.success
        assert "not valid JSON" in result.message


class TestPrecompile:
    """JsonTemplateCache.precompile builds the whole cache."""

    def test_all_templates(self, config: WatchConfig) -> None:
        count = JsonTemplateCache().precompile(config)

        assert count == 4
        assert set(read_cache(config.cache_path)) == {
            "pg_about/Index",
            "pg_about/Contact",
            "pg_home/Index",
            "wg_SiteFooter/Index",
        }

    def test_explicit_paths(self, config: WatchConfig) -> None:
        paths = [config.root / "templates/pg/home/Index.vash"]
        assert JsonTemplateCache().precompile(config, paths) == 1
        assert read_cache(config.cache_path) == {"pg_home/Index": "<h1>@model.title</h1>\n"}

    def test_nothing_compiled(self, config: WatchConfig) -> None:
        with pytest.raises(CacheError, match="No files were precompiled"):
            JsonTemplateCache().precompile(config, [])

    def test_cache_file_is_json(self, config: WatchConfig) -> None:
        JsonTemplateCache().precompile(config)
        assert isinstance(json.loads(config.cache_path.read_text()), dict)
