"""Tests for vashwatch.config."""

from pathlib import Path

import pytest

from tests.conftest import make_config
from vashwatch._errors import ConfigError
from vashwatch.config import WatchConfig


class TestWatchConfig:
    """WatchConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = WatchConfig()
        assert config.debug_mode is False
        assert config.dir_types == ("pg",)
        assert config.page_dir_type == "pg"
        assert config.page_render_task is None
        assert config.debounce_ms == 300

    def test_frozen(self) -> None:
        config = WatchConfig()
        with pytest.raises(AttributeError):
            config.debug_mode = True  # type: ignore[misc]

    def test_relative_root_resolved_to_absolute(self) -> None:
        config = WatchConfig(root=Path("site"))
        assert config.root.is_absolute()

    def test_string_globs_become_tuples(self, tmp_path: Path) -> None:
        config = WatchConfig(
            root=tmp_path,
            vash_src="a/*.vash",  # type: ignore[arg-type]
            dir_types=["pg", "wg"],  # type: ignore[arg-type]
        )
        assert config.vash_src == ("a/*.vash",)
        assert config.dir_types == ("pg", "wg")

    def test_paths_resolve_from_root(self, tmp_path: Path) -> None:
        config = make_config(tmp_path)
        assert config.cache_path == tmp_path / "dist/precompiled-vash.json"
        assert config.models_path == tmp_path / "dist/models.js"

    def test_template_path(self, tmp_path: Path) -> None:
        config = make_config(tmp_path)
        assert config.template_path("pg", "about") == tmp_path / "templates/pg/about/Index.vash"
        assert (
            config.template_path("wg", "Nav", "Menu.vash")
            == tmp_path / "templates/wg/Nav/Menu.vash"
        )

    def test_initial_tasks_skip_unset(self, tmp_path: Path) -> None:
        config = make_config(tmp_path, combine_models_task="models", precompile_task=None)
        assert config.initial_tasks == ("models", "render")

    def test_watch_globs_templates_first(self, tmp_path: Path) -> None:
        config = make_config(tmp_path)
        assert config.watch_globs == ("templates/**/*.vash", "models/**/*.js")


class TestValidate:
    """validate() raises ConfigError at setup time."""

    def test_complete_config_is_valid(self, tmp_path: Path) -> None:
        make_config(tmp_path).validate()

    def test_missing_options_named(self) -> None:
        with pytest.raises(ConfigError, match="vash_src.*cache_dest"):
            WatchConfig().validate()

    def test_bad_placeholder(self, tmp_path: Path) -> None:
        config = make_config(tmp_path, page_template_path="{kind}/{module_name}")
        with pytest.raises(ConfigError, match="page_template_path"):
            config.validate()

    def test_page_dir_type_must_be_a_dir_type(self, tmp_path: Path) -> None:
        config = make_config(tmp_path, dir_types=("wg",))
        with pytest.raises(ConfigError, match="page_dir_type"):
            config.validate()
