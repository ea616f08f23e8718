"""
Templates Routes: 템플릿 CRUD API.

- GET    /api/templates          → 목록 (소유자 기준)
- GET    /api/templates/{id}     → 단건 (없으면 404)
- POST   /api/templates          → 검증 후 생성, 201
- PUT    /api/templates/{id}     → 부분 업데이트
- DELETE /api/templates/{id}     → 204 / 404
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request, Response

from src.app.dependencies import get_owner_id, get_store, to_http_error
from src.core.ids import new_id
from src.domain.errors import EditorError, ErrorCodes
from src.domain.schemas import Template

logger = logging.getLogger(__name__)

api_router = APIRouter()


def parse_template_payload(payload: Any) -> Template:
    """
    요청 body → Template. id 가 없으면 임시 id 부여 (create 가 새로 발급).

    Raises:
        HTTPException: 400
    """
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=400,
            detail={"code": ErrorCodes.INVALID_TEMPLATE, "message": "Template must be a JSON object"},
        )
    data = dict(payload)
    if not data.get("id"):
        data["id"] = new_id()
    try:
        return Template.from_dict(data)
    except EditorError as e:
        raise to_http_error(e) from e


def not_found(template_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"code": ErrorCodes.TEMPLATE_NOT_FOUND, "message": f"Template '{template_id}' not found"},
    )


# =============================================================================
# API Routes
# =============================================================================

@api_router.get("")
async def list_templates(request: Request) -> list[dict[str, Any]]:
    """템플릿 목록."""
    try:
        templates = get_store(request).list_templates(get_owner_id(request))
    except EditorError as e:
        raise to_http_error(e) from e
    return [t.to_dict() for t in templates]


@api_router.get("/{template_id}")
async def get_template(request: Request, template_id: str) -> dict[str, Any]:
    """템플릿 단건."""
    try:
        template = get_store(request).get(template_id)
    except EditorError as e:
        raise to_http_error(e) from e
    if template is None:
        raise not_found(template_id)
    return template.to_dict()


@api_router.post("", status_code=201)
async def create_template(
    request: Request,
    payload: Any = Body(...),
) -> dict[str, Any]:
    """템플릿 생성 (항상 새 id)."""
    template = parse_template_payload(payload)
    try:
        created = get_store(request).create(template, get_owner_id(request))
    except EditorError as e:
        raise to_http_error(e) from e

    logger.info(f"Template created: {created.id}")
    return created.to_dict()


@api_router.put("/{template_id}")
async def update_template(
    request: Request,
    template_id: str,
    payload: Any = Body(...),
) -> dict[str, Any]:
    """부분 업데이트 (병합 후 재검증)."""
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=400,
            detail={"code": ErrorCodes.INVALID_TEMPLATE, "message": "Template must be a JSON object"},
        )
    try:
        updated = get_store(request).update(template_id, payload)
    except EditorError as e:
        raise to_http_error(e) from e
    if updated is None:
        raise not_found(template_id)

    logger.info(f"Template updated: {template_id}")
    return updated.to_dict()


@api_router.delete("/{template_id}", status_code=204)
async def delete_template(request: Request, template_id: str) -> Response:
    """템플릿 삭제."""
    try:
        deleted = get_store(request).delete(template_id)
    except EditorError as e:
        raise to_http_error(e) from e
    if not deleted:
        raise not_found(template_id)

    logger.info(f"Template deleted: {template_id}")
    return Response(status_code=204)
