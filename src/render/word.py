"""
Word (DOCX) 렌더러: python-docx 기반.

규칙:
- Variable 하나 = 문단 하나, Template 저장 순서 그대로 (위치로 정렬하지 않음)
- 정렬: textAlign (left/center/right/justify, 기본 left)
- 런 하나: 값, 폰트, 크기(반 포인트 = fontSize * 2), 색상(# 제거),
  bold / italic / underline
- 세로 위치 근사: space-before = y * 2 (twip). 절대 위치 아님
- 배경 이미지, 물리 페이지 크기는 사용하지 않음
"""

import io

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor, Twips

from src.domain.errors import EditorError, ErrorCodes
from src.domain.schemas import Template, Variable
from src.render.base import ExportArtifact, make_artifact, normalize_hex_color

ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


def convert_text_align(text_align: str | None) -> WD_ALIGN_PARAGRAPH:
    """CSS text-align → DOCX 정렬 (기본 LEFT)."""
    return ALIGNMENTS.get(text_align or "left", WD_ALIGN_PARAGRAPH.LEFT)


class DocxRenderer:
    """
    Word 문서 렌더러.

    Usage:
        renderer = DocxRenderer()
        artifact = renderer.render(template)
    """

    def build_document(self, template: Template) -> DocxDocument:
        """Template → python-docx Document."""
        doc = Document()
        for variable in template.variables:
            self._add_variable(doc, variable)
        return doc

    def render(self, template: Template) -> ExportArtifact:
        """
        Template → DOCX 바이트.

        Raises:
            EditorError: RENDER_FAILED
        """
        try:
            doc = self.build_document(template)
            buffer = io.BytesIO()
            doc.save(buffer)
        except EditorError:
            raise
        except Exception as e:
            raise EditorError(
                ErrorCodes.RENDER_FAILED,
                format="docx",
                template_id=template.id,
                error=str(e),
            ) from e

        return make_artifact(template, "docx", buffer.getvalue())

    def _add_variable(self, doc: DocxDocument, variable: Variable) -> None:
        fmt = variable.format

        paragraph = doc.add_paragraph()
        paragraph.alignment = convert_text_align(fmt.text_align)
        paragraph.paragraph_format.space_before = Twips(round(variable.y * 2))
        paragraph.paragraph_format.space_after = Twips(0)

        run = paragraph.add_run(variable.value)
        run.font.name = fmt.font_family
        run.font.size = Pt(fmt.font_size)
        run.bold = fmt.is_bold
        run.italic = fmt.is_italic
        run.underline = True if fmt.is_underline else None

        color = normalize_hex_color(fmt.color)
        if color is not None:
            run.font.color.rgb = RGBColor.from_string(color)


def render_docx(template: Template) -> ExportArtifact:
    """
    Word 문서 생성 (간편 함수).

    Returns:
        ExportArtifact ({title or 'document'}.docx)
    """
    return DocxRenderer().render(template)
