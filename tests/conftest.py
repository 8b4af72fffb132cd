import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from roguegen import create_app, logging_utils  # noqa: E402
from roguegen.dungeon.config import DungeonConfig  # noqa: E402
from roguegen.dungeon.pipeline import DungeonService  # noqa: E402
from roguegen.random_source import SeededRandom  # noqa: E402
from roguegen.routes.level_api import clear_level_cache  # noqa: E402


@pytest.fixture()
def config():
    return DungeonConfig()


@pytest.fixture()
def make_service():
    """Factory: make_service(seed, **kwargs) -> DungeonService on a fresh stream."""

    def _make(seed="test-dungeon-seed", **kwargs):
        return DungeonService(SeededRandom(seed), **kwargs)

    return _make


@pytest.fixture()
def test_app():
    app = create_app({"TESTING": True, "ROGUEGEN_DUNGEON_CONFIG": DungeonConfig(max_depth=3)})
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Log threshold and the API level cache are module globals; keep tests isolated."""
    level = logging_utils.CURRENT_LEVEL
    clear_level_cache()
    yield
    logging_utils.CURRENT_LEVEL = level
    clear_level_cache()
