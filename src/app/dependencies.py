"""
Route 공통 헬퍼: app.state 접근, EditorError → HTTPException 변환.

저장소와 설정은 lifespan 에서 app.state 에 올라가며, 라우트는 여기서만 꺼낸다.
"""

import logging
import urllib.parse
from pathlib import Path
from typing import Any

from fastapi import HTTPException, Request

from src.domain.constants import DEFAULT_OWNER_ID
from src.domain.errors import EditorError, ErrorCodes
from src.render.images import ImageLoader, make_image_loader
from src.templates.store import TemplateStore

logger = logging.getLogger(__name__)

# 에러 코드 → HTTP 상태
STATUS_BY_CODE = {
    ErrorCodes.VALIDATION_FAILED: 400,
    ErrorCodes.INVALID_TEMPLATE: 400,
    ErrorCodes.DUPLICATE_VARIABLE_ID: 400,
    ErrorCodes.UNSUPPORTED_FORMAT: 400,
    ErrorCodes.UNSUPPORTED_FILE_TYPE: 400,
    ErrorCodes.UPLOAD_REJECTED: 400,
    ErrorCodes.IMAGE_SOURCE_REJECTED: 400,
    ErrorCodes.TEMPLATE_NOT_FOUND: 404,
    ErrorCodes.VARIABLE_NOT_FOUND: 404,
    ErrorCodes.INVALID_STATE: 409,
    ErrorCodes.IMPORT_FAILED: 500,
    ErrorCodes.RENDER_FAILED: 500,
    ErrorCodes.IMAGE_DECODE_FAILED: 500,
    ErrorCodes.STORAGE_FAILED: 500,
    ErrorCodes.STORAGE_LOCK_TIMEOUT: 503,
}


def to_http_error(e: EditorError) -> HTTPException:
    """EditorError → HTTPException (detail = {code, message})."""
    status_code = STATUS_BY_CODE.get(e.code, 500)
    if status_code >= 500:
        logger.error(f"Request failed: {e}")
    else:
        logger.warning(f"Request rejected: {e}")
    return HTTPException(
        status_code=status_code,
        detail={"code": e.code, "message": e.message},
    )


def get_config(request: Request) -> dict[str, Any]:
    return getattr(request.app.state, "config", None) or {}


def get_store(request: Request) -> TemplateStore:
    return request.app.state.store


def get_owner_id(request: Request) -> str:
    return getattr(request.app.state, "owner_id", DEFAULT_OWNER_ID)


def get_uploads_dir(request: Request) -> Path:
    return request.app.state.uploads_dir


def get_image_loader(request: Request) -> ImageLoader:
    """data URL + 업로드 URL 만 허용하는 로더 (서버 파일 경로 불가)."""
    return make_image_loader(get_uploads_dir(request))


def content_disposition(filename: str) -> str:
    """
    attachment 헤더 값.

    비 ASCII 파일명은 RFC 5987 filename* 로 인코딩.
    """
    quoted = urllib.parse.quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename*=utf-8''{quoted}"
