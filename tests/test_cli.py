"""Tests for the CLI module."""

import argparse
import json
from unittest.mock import patch

import pytest

from whatif_sync.cli import load_settings, main
from whatif_sync.storage import AssetCache, JsonDocumentStore


@pytest.fixture
def offline_root(tmp_path):
    return tmp_path / "offline"


@pytest.fixture
def site_client(populated_site):
    """Patch the CLI client so commands talk to the fake site."""
    with patch("whatif_sync.cli.WhatIfClient", side_effect=lambda config: populated_site.client()):
        yield populated_site


def run(offline_root, *args) -> int:
    return main(["--offline-root", str(offline_root), *args])


class TestCLIBasics:
    """Tests for argument handling."""

    def test_no_command_prints_help(self, capsys):
        """Running without a command prints help and succeeds."""
        assert main([]) == 0
        assert "whatif-sync" in capsys.readouterr().out

    def test_load_settings_overrides(self, tmp_path):
        """Command-line flags override the settings file."""
        settings_path = tmp_path / "settings.json"
        settings_path.write_text(json.dumps({"theme": {"night": True}, "offline_mode": False}))
        args = argparse.Namespace(
            settings=settings_path,
            offline_root=tmp_path / "root",
            offline=True,
            theme="amoled",
            invert=True,
        )

        settings = load_settings(args)

        assert settings.offline_root == tmp_path / "root"
        assert settings.offline_mode is True
        assert settings.theme.amoled and not settings.theme.night
        assert settings.theme.invert

    def test_load_settings_without_overrides(self, tmp_path):
        """Without flags the settings file is used as is."""
        settings_path = tmp_path / "settings.json"
        settings_path.write_text(json.dumps({"theme": {"night": True}}))
        args = argparse.Namespace(
            settings=settings_path, offline_root=None, offline=False, theme=None, invert=False
        )

        settings = load_settings(args)

        assert settings.theme.night is True
        assert settings.offline_mode is False


class TestCLISync:
    """Tests for sync, list and search."""

    def test_sync_and_list(self, site_client, offline_root, capsys):
        """sync stores the archive and list shows it."""
        assert run(offline_root, "sync") == 0
        assert run(offline_root, "list") == 0

        out = capsys.readouterr().out
        assert "Relativistic Baseball" in out
        assert "Lunar Swimming" in out

    def test_sync_failure(self, fake_site, offline_root, caplog):
        """A failed sync exits with 1."""
        with patch("whatif_sync.cli.WhatIfClient", side_effect=lambda config: fake_site.client()):
            assert run(offline_root, "sync") == 1

        assert "Synchronization failed" in caplog.text

    def test_search(self, site_client, offline_root, capsys):
        """search prints matching titles."""
        run(offline_root, "sync")
        capsys.readouterr()

        assert run(offline_root, "search", "glass") == 0

        out = capsys.readouterr().out
        assert "Glass Half Empty" in out
        assert "Lunar Swimming" not in out


class TestCLIFlags:
    """Tests for flag commands."""

    def test_mark_read_and_favorite(self, site_client, offline_root, capsys):
        """Flags are persisted in the store."""
        run(offline_root, "sync")

        assert run(offline_root, "mark-read", "2") == 0
        assert run(offline_root, "favorite", "3") == 0

        store = JsonDocumentStore(offline_root / "articles.json")
        assert store.get(2).read
        assert store.get(3).favorite

        capsys.readouterr()
        run(offline_root, "list", "--favorites")
        assert capsys.readouterr().out.count("\n") == 1

    def test_unknown_article(self, offline_root, caplog):
        """Flag commands fail for unknown articles."""
        assert run(offline_root, "mark-read", "99") == 1
        assert run(offline_root, "favorite", "99") == 1

    def test_mark_all_read(self, site_client, offline_root):
        """mark-all-read and --unread toggle every article."""
        run(offline_root, "sync")

        run(offline_root, "mark-all-read")
        assert all(a.read for a in JsonDocumentStore(offline_root / "articles.json").articles())

        run(offline_root, "mark-all-read", "--unread")
        assert not any(a.read for a in JsonDocumentStore(offline_root / "articles.json").articles())


class TestCLIDownloadAndRender:
    """Tests for download and render commands."""

    def test_download_article(self, site_client, offline_root):
        """download stores one article."""
        assert run(offline_root, "download", "1") == 0
        assert AssetCache(offline_root).has_document(1)

    def test_download_missing_article(self, site_client, offline_root):
        """download exits with 1 when the page is unreachable."""
        assert run(offline_root, "download", "99") == 1

    def test_download_all_then_render_offline(self, site_client, offline_root, tmp_path):
        """Articles downloaded for offline use render without the network."""
        assert run(offline_root, "download-all") == 0
        site_client.routes.clear()

        output = tmp_path / "out" / "1.html"
        refs_output = tmp_path / "out" / "1.refs.txt"
        result = run(
            offline_root, "--offline", "--theme", "night",
            "render", "1", "--output", str(output), "--refs-output", str(refs_output),
        )

        assert result == 0
        html = output.read_text()
        assert 'href="night.css"' in html
        assert AssetCache(offline_root).image_path(1, 1).as_uri() in html
        assert "Second note." in refs_output.read_text()

    def test_render_offline_unavailable(self, site_client, offline_root, caplog):
        """Offline render of a never-downloaded article fails."""
        run(offline_root, "sync")

        assert run(offline_root, "--offline", "render", "1") == 1
        assert "Article unavailable" in caplog.text

    def test_render_offline_empty_copy(self, site_client, offline_root, caplog):
        """Offline render of a truncated cached copy reports it as unavailable."""
        run(offline_root, "sync")
        AssetCache(offline_root).store_document(1, "")

        assert run(offline_root, "--offline", "render", "1") == 1
        assert "Article unavailable" in caplog.text
        assert "is empty" in caplog.text

    def test_render_unknown(self, site_client, offline_root):
        """Rendering an unknown number fails."""
        assert run(offline_root, "render", "1") == 1

    def test_render_to_stdout(self, site_client, offline_root, capsys):
        """Without --output the page goes to stdout."""
        run(offline_root, "sync")
        capsys.readouterr()

        assert run(offline_root, "render", "2") == 0
        assert "https://what-if.xkcd.com/imgs/a/1/pitch.png" in capsys.readouterr().out

    def test_download_overview_and_delete(self, site_client, offline_root):
        """Overview images are stored and delete-offline removes them."""
        assert run(offline_root, "download-overview") == 0
        cache = AssetCache(offline_root)
        assert cache.overview_image_path(3).exists()

        assert run(offline_root, "delete-offline") == 0
        assert not cache.base_dir.exists()
