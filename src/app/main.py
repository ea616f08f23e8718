"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uvicorn src.app.main:app --reload
- 프로덕션: uvicorn src.app.main:app

설정:
- 프로젝트 루트의 default.yaml (TEMPLATE_EDITOR_CONFIG 로 경로 변경 가능)
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI

from src.app.routes import export, imports, pages, templates, uploads
from src.core.logging import configure_logging
from src.domain.constants import DEFAULT_OWNER_ID, GRID_SIZE
from src.templates.store import build_store

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_ENV_VAR = "TEMPLATE_EDITOR_CONFIG"

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드 (없으면 빈 dict → 기본값)."""
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def editor_settings(config: dict[str, Any]) -> dict[str, Any]:
    """editor 섹션 + 기본값."""
    section = config.get("editor") or {}
    return {
        "grid_size": int(section.get("grid_size", GRID_SIZE)),
        "snap_enabled": bool(section.get("snap_enabled", True)),
        "show_grid": bool(section.get("show_grid", True)),
        "live_edits": bool(section.get("live_edits", False)),
    }


def _resolve_dir(value: str | None, default: str, base_dir: Path) -> Path:
    path = Path(value or default)
    return path if path.is_absolute() else base_dir / path


# =============================================================================
# App Factory
# =============================================================================


def create_app(config: dict[str, Any] | None = None, base_dir: Path = PROJECT_ROOT) -> FastAPI:
    """
    애플리케이션 생성.

    Args:
        config: 설정 dict (None 이면 시작 시 load_config())
        base_dir: 상대 경로(storage.path, uploads.dir) 기준 디렉터리
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        애플리케이션 생명주기 관리.

        시작 시: 설정 로드, 로깅, 저장소/업로드 디렉터리 준비
        """
        # Startup
        app_config = config if config is not None else load_config()
        configure_logging(app_config)

        storage = app_config.get("storage") or {}
        uploads = app_config.get("uploads") or {}

        app.state.config = app_config
        app.state.store = build_store(app_config, base_dir)
        app.state.owner_id = storage.get("owner_id", DEFAULT_OWNER_ID)
        app.state.uploads_dir = _resolve_dir(uploads.get("dir"), "uploads", base_dir)
        app.state.uploads_dir.mkdir(parents=True, exist_ok=True)
        app.state.editor_settings = editor_settings(app_config)

        logger.info(f"Template editor started (uploads: {app.state.uploads_dir})")

        yield

        # Shutdown
        logger.info("Template editor stopped")

    app = FastAPI(
        title="Template Canvas Editor",
        description="배경 이미지 위에 텍스트 변수를 배치하고 PDF / Word / JSON 으로 내보내기",
        version="0.1.0",
        lifespan=lifespan,
    )

    # 페이지 라우트 (HTML)
    app.include_router(pages.router, tags=["Pages"])

    # API 라우트
    app.include_router(templates.api_router, prefix="/api/templates", tags=["Templates API"])
    app.include_router(export.api_router, tags=["Export API"])
    app.include_router(uploads.api_router, prefix="/api", tags=["Upload API"])
    app.include_router(imports.api_router, prefix="/api", tags=["Import API"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """헬스 체크."""
        return {"status": "ok"}

    return app


app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
