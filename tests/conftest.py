"""
Shared fixtures: a real SQLite store per test, a deterministic clock and id
generator, and a fake media processor that writes placeholder files.
"""
import logging

import pytest
import pytest_asyncio

from vidiary.core.config import Settings
from vidiary.services.assets import AssetStorage
from vidiary.services.catalog_cache import CatalogCache
from vidiary.store.durable_store import DurableVideoStore

from tests.helpers import FakeMediaProcessor, SequentialIds, StepClock


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: slower tests")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_dir=tmp_path / "data", log_dir=tmp_path / "logs")


@pytest_asyncio.fixture
async def store(tmp_path):
    store = DurableVideoStore(tmp_path / "catalog.db")
    yield store
    await store.close()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def cache(store, ids, clock) -> CatalogCache:
    return CatalogCache(store, id_factory=ids, clock=clock)


@pytest.fixture
def assets(tmp_path) -> AssetStorage:
    return AssetStorage(
        videos_dir=tmp_path / "data" / "videos",
        thumbnails_dir=tmp_path / "data" / "thumbnails",
        imports_dir=tmp_path / "data" / "imports",
    )


@pytest.fixture
def processor(tmp_path) -> FakeMediaProcessor:
    return FakeMediaProcessor(tmp_path / "data" / "videos")


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() so file handlers don't leak between tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
