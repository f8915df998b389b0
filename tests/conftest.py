"""
Pytest configuration and shared fixtures

Common fixtures used across multiple test files are defined here.
"""
import sys
from pathlib import Path

import pytest

# Add api directory to path for imports
api_path = Path(__file__).parent.parent / "api"
sys.path.insert(0, str(api_path))

from config import SearchConfig  # noqa: E402
from search.search_factory import SearchServiceFactory  # noqa: E402
from tests import BACKENDS, make_note  # noqa: E402


@pytest.fixture
def search_config():
    """Search config with an in-memory SQLite database"""
    return SearchConfig(backend="sqlite", index_path=":memory:")


@pytest.fixture(params=BACKENDS)
def search_service(request, search_config):
    """Each test using this fixture runs against every backend"""
    service = SearchServiceFactory.create(search_config, backend=request.param)
    yield service
    service.close()


@pytest.fixture
def sqlite_service(search_config):
    service = SearchServiceFactory.create(search_config, backend="sqlite")
    yield service
    service.close()


@pytest.fixture
def memory_service(search_config):
    service = SearchServiceFactory.create(search_config, backend="memory")
    yield service
    service.close()


@pytest.fixture
def intro_note():
    """Note n1 "Intro" with a single paragraph p1 "hello world" """
    return make_note("n1", "Intro", "hello world")
