"""
test_importer.py - 파일 가져오기 서비스 테스트

검증 포인트:
1. PDF → 첫 페이지 PNG data URL (scale 1.5)
2. DOCX → 문단 텍스트 줄바꿈 연결
3. image/* → data URL
4. 그 외 → UNSUPPORTED_FILE_TYPE, 손상 파일 → IMPORT_FAILED
"""

import fitz
import pytest

from src.app.services.importer import (
    ImportResult,
    guess_content_type,
    import_file,
    import_path,
)
from src.domain.errors import EditorError, ErrorCodes
from src.render.images import decode_data_url

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TestImportFile:
    """import_file 함수 테스트."""

    def test_pdf_first_page_as_png(self, pdf_bytes):
        """PDF → PNG (600x800 * 1.5)."""
        result = import_file("form.pdf", "application/pdf", pdf_bytes)

        assert result.type == "image"
        assert result.content.startswith("data:image/png;base64,")
        pix = fitz.Pixmap(decode_data_url(result.content))
        assert (pix.width, pix.height) == (900, 1200)

    def test_docx_text(self, docx_bytes):
        """DOCX → 문단 텍스트."""
        result = import_file("body.docx", DOCX_MIME, docx_bytes)

        assert result == ImportResult(type="text", content="First line\nSecond line")

    def test_docx_by_extension(self, docx_bytes):
        """MIME 이 없어도 확장자로 판단."""
        result = import_file("body.docx", None, docx_bytes)

        assert result.type == "text"

    def test_image(self, png_bytes):
        """image/* → data URL."""
        result = import_file("photo.png", "image/png", png_bytes)

        assert result.type == "image"
        assert decode_data_url(result.content) == png_bytes

    def test_unsupported(self):
        """텍스트 파일 → UNSUPPORTED_FILE_TYPE."""
        with pytest.raises(EditorError) as exc_info:
            import_file("notes.txt", "text/plain", b"hello")

        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_FILE_TYPE

    def test_corrupt_pdf(self):
        """손상된 PDF → IMPORT_FAILED."""
        with pytest.raises(EditorError) as exc_info:
            import_file("broken.pdf", "application/pdf", b"%PDF-garbage")

        assert exc_info.value.code == ErrorCodes.IMPORT_FAILED

    def test_corrupt_docx(self):
        """손상된 DOCX → IMPORT_FAILED."""
        with pytest.raises(EditorError) as exc_info:
            import_file("broken.docx", DOCX_MIME, b"PK\x03\x04not really")

        assert exc_info.value.code == ErrorCodes.IMPORT_FAILED

    def test_to_dict(self):
        """API 응답 형태."""
        assert ImportResult(type="text", content="x").to_dict() == {"type": "text", "content": "x"}


class TestImportPath:
    """import_path / guess_content_type 테스트."""

    def test_reads_file(self, tmp_path, docx_bytes):
        """경로에서 읽기."""
        path = tmp_path / "body.docx"
        path.write_bytes(docx_bytes)

        assert import_path(path).content == "First line\nSecond line"

    def test_missing_file(self, tmp_path):
        """없는 파일 → IMPORT_FAILED."""
        with pytest.raises(EditorError) as exc_info:
            import_path(tmp_path / "missing.pdf")

        assert exc_info.value.code == ErrorCodes.IMPORT_FAILED

    @pytest.mark.parametrize("name,expected", [
        ("a.pdf", "application/pdf"),
        ("a.docx", DOCX_MIME),
        ("a.png", "image/png"),
        ("a.unknownext", "application/octet-stream"),
    ])
    def test_guess_content_type(self, name, expected):
        """확장자 → MIME."""
        assert guess_content_type(name) == expected
