"""
PDF 렌더러: reportlab 기반.

규칙:
- 방향: 물리 가로 > 세로 → landscape, 아니면 portrait
- 단위: mm / in / pt / px / cm 만 허용, 그 외 mm
- 페이지 크기 = PageSize 물리 크기
- 배경: backgroundImage 있고 showBackgroundInOutput 이면 페이지 전체에
- Variable: 캔버스 px → 물리 단위 (비율 변환), 한 줄 텍스트 그대로 배치
  (줄바꿈/넘침 처리 없음)
"""

import io
import logging
from dataclasses import dataclass, field

from reportlab.lib import colors
from reportlab.lib.units import cm, inch, mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from src.core.coordinates import canvas_size_for, page_orientation, to_physical
from src.domain.constants import get_page_size
from src.domain.errors import EditorError, ErrorCodes
from src.domain.schemas import DEFAULT_COLOR, PageSize, Template, VariableFormat
from src.render.base import ExportArtifact, make_artifact, normalize_hex_color
from src.render.images import ImageLoader, make_image_loader

logger = logging.getLogger(__name__)

# 단위 → point 배율
UNIT_TO_POINTS: dict[str, float] = {
    "mm": mm,
    "cm": cm,
    "in": inch,
    "pt": 1.0,
    "px": 0.75,  # 96 px = 72 pt
}
DEFAULT_PDF_UNIT = "mm"

# PDF 기본 14 폰트 패밀리: (regular, bold, italic, bold-italic)
BASE_FONTS: dict[str, tuple[str, str, str, str]] = {
    "helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}

FONT_FAMILY_ALIASES = {
    "arial": "helvetica",
    "helvetica": "helvetica",
    "verdana": "helvetica",
    "tahoma": "helvetica",
    "sans-serif": "helvetica",
    "times": "times",
    "times new roman": "times",
    "georgia": "times",
    "serif": "times",
    "courier": "courier",
    "courier new": "courier",
    "monospace": "courier",
}


def normalize_pdf_unit(unit: str) -> str:
    return unit if unit in UNIT_TO_POINTS else DEFAULT_PDF_UNIT


def resolve_pdf_font(family: str | None, bold: bool = False, italic: bool = False) -> str:
    """
    CSS 폰트 패밀리 → PDF 기본 폰트 이름.

    모르는 패밀리는 Helvetica.
    """
    key = (family or "").split(",")[0].strip().strip("'\"").lower()
    variants = BASE_FONTS[FONT_FAMILY_ALIASES.get(key, "helvetica")]
    if bold and italic:
        return variants[3]
    if bold:
        return variants[1]
    if italic:
        return variants[2]
    return variants[0]


def _pdf_color(value: str | None) -> colors.Color:
    hex_value = normalize_hex_color(value) or normalize_hex_color(DEFAULT_COLOR)
    return colors.HexColor(f"#{hex_value}")


# =============================================================================
# Layout
# =============================================================================

@dataclass
class TextPlacement:
    """텍스트 배치 명령 (x, y: 물리 단위, 페이지 좌상단 기준)."""
    text: str
    x: float
    y: float
    font_name: str
    font_size: float
    color: str


@dataclass
class PdfLayout:
    """PDF 페이지 구성 명령."""
    orientation: str
    unit: str
    page_width: float
    page_height: float
    background_image: str | None = None
    texts: list[TextPlacement] = field(default_factory=list)

    @property
    def page_size_points(self) -> tuple[float, float]:
        factor = UNIT_TO_POINTS[self.unit]
        return self.page_width * factor, self.page_height * factor


class PdfRenderer:
    """
    PDF 렌더러.

    Usage:
        renderer = PdfRenderer()
        artifact = renderer.render(template)
        artifact.save(output_dir)
    """

    def __init__(
        self,
        image_loader: ImageLoader | None = None,
        page_sizes: dict[str, PageSize] | None = None,
    ):
        """
        Args:
            image_loader: backgroundImage 문자열 → 바이트 (기본: data URL / 파일 경로)
            page_sizes: PageSize 테이블 (기본 PAGE_SIZES)
        """
        self.image_loader = image_loader or make_image_loader(allow_paths=True)
        self.page_sizes = page_sizes

    def build_layout(self, template: Template) -> PdfLayout:
        """Template → PdfLayout (계산만, 출력 없음)."""
        page = get_page_size(template.page_size, self.page_sizes)
        canvas_px = canvas_size_for(page)

        layout = PdfLayout(
            orientation=page_orientation(page),
            unit=normalize_pdf_unit(page.unit),
            page_width=page.width,
            page_height=page.height,
        )

        if template.background_image and template.show_background_in_output:
            layout.background_image = template.background_image

        for variable in template.variables:
            point = to_physical(variable.x, variable.y, canvas_px, page)
            fmt: VariableFormat = variable.format
            layout.texts.append(
                TextPlacement(
                    text=variable.value,
                    x=point.x,
                    y=point.y,
                    font_name=resolve_pdf_font(fmt.font_family, fmt.is_bold, fmt.is_italic),
                    font_size=fmt.font_size or 12,
                    color=fmt.color or DEFAULT_COLOR,
                )
            )

        return layout

    def render(self, template: Template) -> ExportArtifact:
        """
        Template → PDF 바이트.

        Raises:
            EditorError: RENDER_FAILED, IMAGE_DECODE_FAILED, IMAGE_SOURCE_REJECTED
        """
        try:
            layout = self.build_layout(template)
            content = self.draw(layout)
        except EditorError:
            raise
        except Exception as e:
            raise EditorError(
                ErrorCodes.RENDER_FAILED,
                format="pdf",
                template_id=template.id,
                error=str(e),
            ) from e

        return make_artifact(template, "pdf", content)

    def draw(self, layout: PdfLayout) -> bytes:
        """PdfLayout → PDF 바이트."""
        factor = UNIT_TO_POINTS[layout.unit]
        page_w, page_h = layout.page_size_points

        buffer = io.BytesIO()
        canv = canvas.Canvas(buffer, pagesize=(page_w, page_h))

        if layout.background_image:
            self._draw_background(canv, layout.background_image, page_w, page_h)

        for item in layout.texts:
            canv.setFont(item.font_name, float(item.font_size))
            canv.setFillColor(_pdf_color(item.color))
            # reportlab 원점은 좌하단, 레이아웃 y 는 위에서부터
            canv.drawString(item.x * factor, page_h - item.y * factor, item.text)

        canv.showPage()
        canv.save()
        return buffer.getvalue()

    def _draw_background(
        self,
        canv: canvas.Canvas,
        source: str,
        page_w: float,
        page_h: float,
    ) -> None:
        data = self.image_loader(source)
        try:
            image = ImageReader(io.BytesIO(data))
            canv.drawImage(image, 0, 0, width=page_w, height=page_h)
        except Exception as e:
            logger.error(f"Error adding background image to PDF: {e}")
            raise EditorError(
                ErrorCodes.IMAGE_DECODE_FAILED,
                message="Background image could not be decoded",
                error=str(e),
            ) from e


def render_pdf(template: Template, image_loader: ImageLoader | None = None) -> ExportArtifact:
    """
    PDF 생성 (간편 함수).

    Args:
        template: 내보낼 Template
        image_loader: 배경 이미지 로더

    Returns:
        ExportArtifact ({title or 'document'}.pdf)
    """
    return PdfRenderer(image_loader=image_loader).render(template)
