"""
Import Routes: 파일 가져오기.

- POST /api/import (field: file) → {"type": "text" | "image", "content": ...}
  크기 제한은 업로드와 같음 (uploads.max_size_mb)
"""

import logging
from typing import Any

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from src.app.dependencies import get_config, to_http_error
from src.app.routes.uploads import upload_limits
from src.app.services.importer import import_file
from src.domain.errors import EditorError, ErrorCodes

logger = logging.getLogger(__name__)

api_router = APIRouter()


@api_router.post("/import")
async def import_upload(
    request: Request,
    file: UploadFile | None = File(None),
) -> dict[str, Any]:
    """PDF/DOCX/이미지 → 텍스트 또는 이미지 data URL."""
    if file is None or not file.filename:
        raise HTTPException(
            status_code=400,
            detail={"code": ErrorCodes.IMPORT_FAILED, "message": "No file uploaded"},
        )

    max_bytes, _ = upload_limits(get_config(request))
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        logger.warning(f"Import rejected: {file.filename} exceeds {max_bytes} bytes")
        raise HTTPException(
            status_code=400,
            detail={
                "code": ErrorCodes.UPLOAD_REJECTED,
                "message": f"File too large (max {max_bytes // (1024 * 1024)} MB)",
            },
        )

    try:
        result = import_file(file.filename, file.content_type, data)
    except EditorError as e:
        raise to_http_error(e) from e

    logger.info(f"Imported {file.filename} as {result.type}")
    return result.to_dict()
