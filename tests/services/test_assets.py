"""Tests for AssetStorage file handling."""

from pathlib import Path

import pytest

from vidiary.core.exceptions import FileOperationException
from vidiary.services.assets import uri_to_path

pytestmark = pytest.mark.asyncio


class TestUriToPath:

    async def test_plain_path(self):
        assert uri_to_path("/data/videos/a.mp4") == Path("/data/videos/a.mp4")

    async def test_file_uri(self):
        assert uri_to_path("file:///data/videos/my%20clip.mp4") == Path("/data/videos/my clip.mp4")


class TestImportSource:

    async def test_copies_into_imports_dir(self, assets, tmp_path):
        source = tmp_path / "picked.mov"
        source.write_bytes(b"video bytes")

        copy = await assets.import_source(source.as_uri())

        assert copy.parent == assets.imports_dir
        assert copy.suffix == ".mov"
        assert copy.read_bytes() == b"video bytes"
        assert source.exists()

    async def test_each_import_gets_its_own_file(self, assets, tmp_path):
        source = tmp_path / "picked.mp4"
        source.write_bytes(b"x")

        first = await assets.import_source(str(source))
        second = await assets.import_source(str(source))

        assert first != second

    async def test_missing_source_raises(self, assets, tmp_path):
        with pytest.raises(FileOperationException):
            await assets.import_source(str(tmp_path / "nope.mp4"))


class TestDelete:

    async def test_delete_asset(self, assets, tmp_path):
        path = tmp_path / "a.jpg"
        path.write_bytes(b"x")

        assert await assets.delete_asset(path.as_uri()) is True
        assert not path.exists()

    async def test_missing_asset_is_not_an_error(self, assets, tmp_path):
        assert await assets.delete_asset(str(tmp_path / "gone.jpg")) is False

    async def test_empty_reference_is_skipped(self, assets):
        assert await assets.delete_asset(None) is False
        assert await assets.delete_asset("") is False

    async def test_unremovable_asset_is_logged_not_raised(self, assets, tmp_path):
        directory = tmp_path / "actually-a-directory"
        directory.mkdir()

        assert await assets.delete_asset(str(directory)) is False
        assert directory.exists()

    async def test_schedule_cleanup_runs_in_background(self, assets, tmp_path):
        files = [tmp_path / "a.mp4", tmp_path / "a.jpg"]
        for path in files:
            path.write_bytes(b"x")

        task = assets.schedule_cleanup([str(p) for p in files], label="a")
        await assets.wait_for_cleanup()

        assert task.done()
        assert task.result() == 2
        assert not any(path.exists() for path in files)
