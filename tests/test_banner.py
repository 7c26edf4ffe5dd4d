"""Tests for vashwatch.banner — startup banner output."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from unittest.mock import patch

from tests.conftest import make_config
from vashwatch.banner import format_banner, print_banner


class TestFormatBanner:
    def test_lists_what_is_watched(self, tmp_path: Path) -> None:
        output = format_banner(make_config(tmp_path), load_ms=42.5)

        assert "vashwatch" in output
        assert "[production]" in output
        assert "1 template glob" in output
        assert "1 model glob" in output
        assert "42ms" in output
        assert "pg, wg, glb" in output
        assert "render task: render" in output
        assert "Watching for changes" in output

    def test_debug_mode(self, tmp_path: Path) -> None:
        output = format_banner(make_config(tmp_path, debug_mode=True))
        assert "[debug]" in output

    def test_no_render_task(self, tmp_path: Path) -> None:
        output = format_banner(make_config(tmp_path, page_render_task=None))
        assert "render task: none" in output

    def test_warnings(self, tmp_path: Path) -> None:
        output = format_banner(make_config(tmp_path), warnings=["No pages named"])
        assert "No pages named" in output


class TestPrintBanner:
    def test_prints_to_stderr(self, tmp_path: Path) -> None:
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            print_banner(make_config(tmp_path))
        assert "Watching for changes" in buf.getvalue()
