"""Tests for vashwatch.content.pages — page identifiers from arguments."""

from __future__ import annotations

import pytest

from vashwatch.content.pages import get_all_args, normalize_page_name, split_page_name


class TestGetAllArgs:
    """Every ``--name`` argument becomes a page identifier."""

    def test_flags_collected(self) -> None:
        assert get_all_args(["gulp", "watch", "--home", "--about"]) == ["home", "about"]

    def test_non_flags_ignored(self) -> None:
        assert get_all_args(["node", "gulpfile.js", "home"]) == []

    def test_value_stops_at_space(self) -> None:
        assert get_all_args(["--home extra"]) == ["home"]

    def test_bare_double_dash_ignored(self) -> None:
        assert get_all_args(["--"]) == []

    def test_style_guide_shortcut(self) -> None:
        assert get_all_args(["--SG_Buttons"]) == ["styleGuide/SG_Buttons"]

    def test_defaults_to_sys_argv(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.argv", ["vashwatch", "--contact"])
        assert get_all_args() == ["contact"]


class TestNormalizePageName:
    def test_style_guide_prefix_expanded(self) -> None:
        assert normalize_page_name("SG_Buttons") == "styleGuide/SG_Buttons"

    def test_plain_names_unchanged(self) -> None:
        assert normalize_page_name("about/Contact") == "about/Contact"

    def test_already_expanded(self) -> None:
        assert normalize_page_name("styleGuide/SG_Buttons") == "styleGuide/SG_Buttons"


class TestSplitPageName:
    def test_bare_module_uses_index(self) -> None:
        assert split_page_name("home") == ("home", "Index.vash")

    def test_module_and_file(self) -> None:
        assert split_page_name("about/Contact") == ("about", "Contact.vash")

    def test_style_guide(self) -> None:
        assert split_page_name("styleGuide/SG_Buttons") == ("styleGuide", "SG_Buttons.vash")
