"""
Upload Routes: 배경 이미지 업로드 / 제공.

- POST /api/upload (field: image) → {"url": "/api/uploads/<name>"}
  jpeg/jpg/png/gif 만 허용 (확장자 + MIME), 크기 제한 (uploads.max_size_mb)
- GET /api/uploads/{filename} → 파일 (경로 순회 / symlink 차단)
"""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse

from src.app.dependencies import get_config, get_uploads_dir
from src.core.ids import generate_upload_filename
from src.domain.constants import (
    UPLOAD_ALLOWED_EXTENSIONS,
    UPLOAD_FIELD_NAME,
    UPLOAD_MAX_SIZE_MB,
    UPLOAD_URL_PREFIX,
    get_mime_type,
)
from src.domain.errors import ErrorCodes

logger = logging.getLogger(__name__)

api_router = APIRouter()

ALLOWED_IMAGE_MIMES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}


def upload_limits(config: dict[str, Any]) -> tuple[int, tuple[str, ...]]:
    """(최대 바이트, 허용 확장자)."""
    section = config.get("uploads") or {}
    max_mb = section.get("max_size_mb", UPLOAD_MAX_SIZE_MB)
    extensions = tuple(
        e.lower() if e.startswith(".") else f".{e.lower()}"
        for e in section.get("allowed_extensions", UPLOAD_ALLOWED_EXTENSIONS)
    )
    return int(max_mb * 1024 * 1024), extensions


def _reject(message: str) -> HTTPException:
    logger.warning(f"Upload rejected: {message}")
    return HTTPException(
        status_code=400,
        detail={"code": ErrorCodes.UPLOAD_REJECTED, "message": message},
    )


@api_router.post("/upload")
async def upload_image(
    request: Request,
    image: UploadFile | None = File(None),
) -> dict[str, str]:
    """
    이미지 업로드.

    Returns:
        {"url": "/api/uploads/<name>"}
    """
    if image is None or not image.filename:
        raise _reject("No file uploaded")

    max_bytes, extensions = upload_limits(get_config(request))

    ext = Path(image.filename).suffix.lower()
    content_type = (image.content_type or "").lower()
    if ext not in extensions or content_type not in ALLOWED_IMAGE_MIMES:
        raise _reject("Only image files are allowed!")

    # 한도 + 1 바이트까지만 읽어 초과 여부 판단
    file_bytes = await image.read(max_bytes + 1)
    if len(file_bytes) > max_bytes:
        raise _reject(f"File too large (max {max_bytes // (1024 * 1024)} MB)")

    uploads_dir = get_uploads_dir(request)
    uploads_dir.mkdir(parents=True, exist_ok=True)

    filename = generate_upload_filename(ext, UPLOAD_FIELD_NAME)
    (uploads_dir / filename).write_bytes(file_bytes)

    logger.info(f"Uploaded image saved: {filename} ({len(file_bytes)} bytes)")
    return {"url": f"{UPLOAD_URL_PREFIX}{filename}"}


@api_router.get("/uploads/{filename}")
async def get_upload(request: Request, filename: str) -> FileResponse:
    """업로드 파일 제공."""
    uploads_dir = get_uploads_dir(request)
    file_path = uploads_dir / filename

    if not file_path.exists():
        raise HTTPException(status_code=404, detail={"code": "FILE_NOT_FOUND", "message": f"File '{filename}' not found"})

    # 경로 순회 공격 방지 (symlink 포함)
    try:
        resolved = file_path.resolve(strict=True)
        resolved.relative_to(uploads_dir.resolve())
    except (ValueError, OSError):
        raise HTTPException(status_code=400, detail={"code": "INVALID_PATH", "message": "Invalid file path"})

    if file_path.is_symlink():
        raise HTTPException(status_code=400, detail={"code": "SYMLINK_NOT_ALLOWED", "message": "Symbolic links are not allowed"})

    return FileResponse(path=file_path, media_type=get_mime_type(filename))
