from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from vendbox.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def change_client():
    from modules.change_maker.tool.app import app

    return TestClient(app)


@pytest.fixture
def catalog_client():
    from modules.vending_catalog.tool.app import app

    return TestClient(app)


@pytest.fixture
def transfer_client():
    from modules.register_transfer.tool.app import app

    return TestClient(app)


@pytest.fixture
def register():
    return [
        {"denom": 5, "count": 20},
        {"denom": 10, "count": 15},
        {"denom": 20, "count": 10},
        {"denom": 50, "count": 6},
        {"denom": 100, "count": 5},
        {"denom": 200, "count": 3},
    ]
