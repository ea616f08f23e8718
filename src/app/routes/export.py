"""
Export Routes: 템플릿 → PDF / DOCX / JSON 다운로드.

- POST /api/export/{fmt}                  (body: Template JSON)
- GET  /api/templates/{id}/export/{fmt}   (저장된 템플릿)

알 수 없는 포맷 / 허용되지 않은 배경 소스 400, 렌더 실패 500.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Request, Response

from src.app.dependencies import (
    content_disposition,
    get_image_loader,
    get_store,
    to_http_error,
)
from src.app.routes.templates import not_found, parse_template_payload
from src.domain.errors import EditorError
from src.domain.schemas import Template
from src.render.exporter import export_template, normalize_format

logger = logging.getLogger(__name__)

api_router = APIRouter()


def _download(request: Request, template: Template, fmt: str) -> Response:
    try:
        artifact = export_template(template, fmt, image_loader=get_image_loader(request))
    except EditorError as e:
        raise to_http_error(e) from e

    logger.info(f"Exported template {template.id} as {fmt}: {artifact.filename}")
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": content_disposition(artifact.filename)},
    )


@api_router.post("/api/export/{fmt}")
async def export_payload(
    request: Request,
    fmt: str,
    payload: Any = Body(...),
) -> Response:
    """요청 body 의 템플릿을 내보내기."""
    try:
        normalized = normalize_format(fmt)
    except EditorError as e:
        raise to_http_error(e) from e

    template = parse_template_payload(payload)
    return _download(request, template, normalized)


@api_router.get("/api/templates/{template_id}/export/{fmt}")
async def export_stored(request: Request, template_id: str, fmt: str) -> Response:
    """저장된 템플릿을 내보내기."""
    try:
        normalized = normalize_format(fmt)
        template = get_store(request).get(template_id)
    except EditorError as e:
        raise to_http_error(e) from e
    if template is None:
        raise not_found(template_id)

    return _download(request, template, normalized)
