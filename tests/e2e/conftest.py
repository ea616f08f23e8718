"""
E2E 테스트용 앱 / 클라이언트 설정.

- 테스트마다 새 앱 (create_app), 업로드 / 저장소는 tmp_path
- lifespan 실행을 위해 TestClient 는 with 블록으로 사용
"""

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.main import create_app


@pytest.fixture(params=["memory", "file"])
def storage_backend(request) -> str:
    return request.param


@pytest.fixture
def app_config(tmp_path: Path, storage_backend: str) -> dict:
    """테스트용 설정."""
    return {
        "app": {"title": "Template Editor"},
        "storage": {"backend": storage_backend, "path": "data/templates"},
        "uploads": {"dir": "uploads", "max_size_mb": 1},
        "editor": {"grid_size": 25, "snap_enabled": True, "show_grid": True},
        "logging": {"level": "WARNING"},
    }


@pytest.fixture
def app(app_config: dict, tmp_path: Path) -> FastAPI:
    """테스트용 FastAPI 앱."""
    return create_app(app_config, base_dir=tmp_path)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI TestClient."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"
