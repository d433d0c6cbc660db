"""Tests for the capture workflow."""

import pytest

from vidiary.core.exceptions import StorageWriteError, ValidationException, VideoProcessingException
from vidiary.services.capture import CaptureService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(cache, processor, assets):
    return CaptureService(cache, processor, assets, clip_duration=5.0)


async def test_capture_stores_cropped_clip(service, store, cache, processor):
    entry = await service.capture("file:///picked.mov", 12.5, "Morning walk", "by the river")

    assert entry is not None
    assert processor.calls == [("file:///picked.mov", 12.5, 5.0)]
    assert entry.duration == 5.0
    assert entry.description == "by the river"
    assert cache.entries[0] == entry
    assert (await store.get_by_id(entry.id)).uri == entry.uri


async def test_crop_failure_stores_nothing(service, store, cache, processor):
    processor.fail = True

    with pytest.raises(VideoProcessingException):
        await service.capture("file:///picked.mov", 0, "Morning walk")

    assert cache.entries == ()
    assert await store.list_all() == []


async def test_invalid_name_is_rejected_before_cropping(service, processor):
    with pytest.raises(ValidationException):
        await service.capture("file:///picked.mov", 0, "  ")

    assert processor.calls == []


async def test_negative_start_is_rejected(service, processor):
    with pytest.raises(VideoProcessingException):
        await service.capture("file:///picked.mov", -1, "Morning walk")

    assert processor.calls == []


async def test_failed_add_cleans_up_produced_files(service, store, cache, assets, monkeypatch):
    async def broken(record):
        raise StorageWriteError("insert", "disk I/O error")

    monkeypatch.setattr(store, "insert", broken)

    entry = await service.capture("file:///picked.mov", 0, "Morning walk")
    await assets.wait_for_cleanup()

    assert entry is None
    assert cache.entries == ()
    produced = service.processor.output_dir
    assert not (produced / "clip-1.mp4").exists()
    assert not (produced / "clip-1.jpg").exists()
