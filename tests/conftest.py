import pytest

from event_visualizer.indexer import PhpIndexer


@pytest.fixture(scope="session")
def indexer() -> PhpIndexer:
    return PhpIndexer()
