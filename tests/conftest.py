from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from formbuilder.app import create_app
from formbuilder.config import Settings
from formbuilder.storage import init_storage


def make_settings(tmp_path: Path, backend: str) -> Settings:
    return Settings(
        storage_backend=backend,
        sqlite_path=tmp_path / "app.db",
        json_path=tmp_path / "jsonstore.json",
        auth_mode="header",
        auth_header="X-User-Id",
    )


@pytest.fixture(params=["sqlite", "json"])
def settings(request: pytest.FixtureRequest, tmp_path: Path) -> Settings:
    return make_settings(tmp_path, request.param)


@pytest.fixture
def storage(settings: Settings) -> Iterator:
    storage = init_storage(settings)
    yield storage
    storage.dispose()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
    app.state.storage.dispose()
