"""
Import Service: 외부 파일 → 텍스트 / 이미지 (data URL).

지원:
- PDF: 첫 페이지를 PyMuPDF 로 래스터화 (scale 1.5) → PNG data URL
- DOCX / DOC: 모든 문단 텍스트를 줄바꿈으로 연결 (python-docx)
- image/*: 그대로 data URL

그 외는 UNSUPPORTED_FILE_TYPE. 변환 실패는 IMPORT_FAILED.
"""

import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import fitz
from docx import Document

from src.domain.errors import EditorError, ErrorCodes
from src.render.images import encode_data_url

logger = logging.getLogger(__name__)

# PDF 첫 페이지 래스터화 배율
PDF_RENDER_SCALE = 1.5

PDF_MIME = "application/pdf"
WORD_MIMES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}
WORD_EXTENSIONS = {".docx", ".doc"}


@dataclass(frozen=True)
class ImportResult:
    """가져오기 결과: 텍스트면 새 Variable 값, 이미지면 배경."""
    type: Literal["text", "image"]
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "content": self.content}


def guess_content_type(filename: str) -> str:
    """확장자로 MIME 추정 (모르면 application/octet-stream)."""
    suffix = Path(filename).suffix.lower()
    if suffix == ".docx":
        return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def render_pdf_first_page(data: bytes) -> str:
    """
    PDF 첫 페이지 → PNG data URL.

    Raises:
        EditorError: IMPORT_FAILED
    """
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.page_count == 0:
                raise EditorError(
                    ErrorCodes.IMPORT_FAILED,
                    message="PDF has no pages",
                )
            page = doc.load_page(0)
            pix = page.get_pixmap(matrix=fitz.Matrix(PDF_RENDER_SCALE, PDF_RENDER_SCALE))
            png = pix.tobytes("png")
    except EditorError:
        raise
    except Exception as e:
        logger.error(f"Error processing PDF: {e}")
        raise EditorError(
            ErrorCodes.IMPORT_FAILED,
            message="Failed to process PDF file",
            error=str(e),
        ) from e

    return encode_data_url(png, "image/png")


def extract_docx_text(data: bytes) -> str:
    """
    Word 문서 → 문단 텍스트 ("\\n" 연결).

    Raises:
        EditorError: IMPORT_FAILED
    """
    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        logger.error(f"Error processing Word document: {e}")
        raise EditorError(
            ErrorCodes.IMPORT_FAILED,
            message="Failed to process Word document",
            error=str(e),
        ) from e

    return "\n".join(paragraph.text for paragraph in doc.paragraphs)


def import_file(filename: str, content_type: str | None, data: bytes) -> ImportResult:
    """
    파일 하나 가져오기.

    Args:
        filename: 원본 파일명 (확장자 판단용)
        content_type: MIME (없으면 파일명으로 추정)
        data: 파일 바이트

    Raises:
        EditorError: UNSUPPORTED_FILE_TYPE, IMPORT_FAILED
    """
    mime = (content_type or guess_content_type(filename)).lower()
    suffix = Path(filename).suffix.lower()

    if mime == PDF_MIME or suffix == ".pdf":
        return ImportResult(type="image", content=render_pdf_first_page(data))

    if mime in WORD_MIMES or suffix in WORD_EXTENSIONS:
        return ImportResult(type="text", content=extract_docx_text(data))

    if mime.startswith("image/"):
        return ImportResult(type="image", content=encode_data_url(data, mime))

    raise EditorError(
        ErrorCodes.UNSUPPORTED_FILE_TYPE,
        filename=filename,
        content_type=mime,
        message="Unsupported file type",
    )


def import_path(path: Path) -> ImportResult:
    """
    로컬 파일 경로에서 가져오기.

    Raises:
        EditorError: IMPORT_FAILED (읽기 실패), UNSUPPORTED_FILE_TYPE
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise EditorError(
            ErrorCodes.IMPORT_FAILED,
            path=str(path),
            message="File could not be read",
            error=str(e),
        ) from e
    return import_file(path.name, guess_content_type(path.name), data)
