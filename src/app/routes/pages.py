"""
Page Routes (HTML): Jinja2 정적 마크업.

- GET /           → 에디터 화면
- GET /templates  → 저장된 템플릿 목록 화면
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.app.dependencies import get_config, get_owner_id, get_store
from src.core.coordinates import canvas_size_for
from src.domain.constants import PAGE_SIZES

router = APIRouter()

templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=templates_dir)


def _app_title(request: Request) -> str:
    return (get_config(request).get("app") or {}).get("title", "Template Editor")


@router.get("/", response_class=HTMLResponse)
async def editor_page(request: Request) -> HTMLResponse:
    """에디터 화면."""
    editor = getattr(request.app.state, "editor_settings", {})
    page_sizes = [
        {
            "key": page.key,
            "label": page.label,
            "canvas": canvas_size_for(page).to_dict(),
        }
        for page in PAGE_SIZES.values()
    ]
    return jinja_templates.TemplateResponse(
        request,
        "editor.html",
        {
            "app_title": _app_title(request),
            "page_sizes": page_sizes,
            "editor": editor,
        },
    )


@router.get("/templates", response_class=HTMLResponse)
async def templates_page(request: Request) -> HTMLResponse:
    """템플릿 목록 화면."""
    templates = get_store(request).list_templates(get_owner_id(request))
    return jinja_templates.TemplateResponse(
        request,
        "templates.html",
        {
            "app_title": _app_title(request),
            "templates": templates,
            "page_labels": {key: page.label for key, page in PAGE_SIZES.items()},
        },
    )
