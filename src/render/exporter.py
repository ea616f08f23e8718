"""
포맷별 렌더러 선택.

export_template(template, "pdf" | "docx" | "json") → ExportArtifact
"""

from src.domain.constants import EXPORT_FORMATS
from src.domain.errors import EditorError, ErrorCodes
from src.domain.schemas import PageSize, Template
from src.render.base import ExportArtifact
from src.render.images import ImageLoader
from src.render.json_export import JsonRenderer
from src.render.pdf import PdfRenderer
from src.render.word import DocxRenderer


def normalize_format(fmt: str) -> str:
    """
    포맷 문자열 정규화 (".PDF" → "pdf").

    Raises:
        EditorError: UNSUPPORTED_FORMAT
    """
    normalized = (fmt or "").strip().lower().lstrip(".")
    if normalized not in EXPORT_FORMATS:
        raise EditorError(
            ErrorCodes.UNSUPPORTED_FORMAT,
            format=fmt,
            message=f"Unsupported export format: {fmt}",
            supported=", ".join(EXPORT_FORMATS),
        )
    return normalized


def export_template(
    template: Template,
    fmt: str,
    image_loader: ImageLoader | None = None,
    page_sizes: dict[str, PageSize] | None = None,
) -> ExportArtifact:
    """
    Template 을 지정 포맷으로 내보내기. Template 은 변경하지 않는다.

    Raises:
        EditorError: UNSUPPORTED_FORMAT, RENDER_FAILED, IMAGE_DECODE_FAILED, IMAGE_SOURCE_REJECTED
    """
    normalized = normalize_format(fmt)
    if normalized == "pdf":
        return PdfRenderer(image_loader=image_loader, page_sizes=page_sizes).render(template)
    if normalized == "docx":
        return DocxRenderer().render(template)
    return JsonRenderer().render(template)
