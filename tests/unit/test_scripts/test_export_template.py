"""
test_export_template.py - export_template.py 스크립트 테스트

테스트 케이스:
- TC1: 기본 포맷 pdf
- TC2: 여러 포맷 동시 출력
- TC3: 잘못된 템플릿 파일 → 종료 코드 1
- TC4: 업로드 URL 배경 해석
- TC5: 파일 경로 배경 (로컬 전용)
"""

import sys
from pathlib import Path

import fitz
import pytest

# scripts 모듈 임포트를 위한 경로 추가
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent / "scripts"))

from export_template import export_file, main

from src.core.serialize import serialize_template


@pytest.fixture
def template_file(tmp_path: Path, sample_template) -> Path:
    path = tmp_path / "invoice.json"
    path.write_text(serialize_template(sample_template), encoding="utf-8")
    return path


class TestExportTemplateScript:
    """CLI 테스트."""

    def test_default_pdf(self, template_file: Path, tmp_path: Path):
        """TC1: 포맷 생략 → pdf."""
        out = tmp_path / "out"

        assert main([str(template_file), "-o", str(out)]) == 0
        assert (out / "Invoice.pdf").read_bytes().startswith(b"%PDF")

    def test_multiple_formats(self, template_file: Path, tmp_path: Path):
        """TC2: -f 반복."""
        out = tmp_path / "out"

        assert main([str(template_file), "-f", "docx", "-f", "json", "-o", str(out)]) == 0
        assert sorted(p.name for p in out.iterdir()) == ["Invoice.docx", "Invoice.json"]

    def test_invalid_template(self, tmp_path: Path):
        """TC3: 잘못된 JSON → 1."""
        bad = tmp_path / "bad.json"
        bad.write_text("{", encoding="utf-8")

        assert main([str(bad), "-o", str(tmp_path / "out")]) == 1

    def test_missing_template(self, tmp_path: Path):
        """없는 파일 → 1."""
        assert main([str(tmp_path / "missing.json")]) == 1

    def test_uploads_dir(self, tmp_path: Path, sample_template, png_bytes):
        """TC4: /api/uploads/ 배경 → uploads-dir 에서 찾음."""
        uploads = tmp_path / "uploads"
        uploads.mkdir()
        (uploads / "image-1-1.png").write_bytes(png_bytes)
        sample_template.background_image = "/api/uploads/image-1-1.png"
        path = tmp_path / "bg.json"
        path.write_text(serialize_template(sample_template), encoding="utf-8")

        written = export_file(path, ["pdf"], tmp_path / "out", uploads)

        assert written == [tmp_path / "out" / "Invoice.pdf"]

    def test_file_path_background(self, tmp_path: Path, sample_template, png_bytes):
        """TC5: 로컬 CLI 는 파일 경로 배경 허용."""
        background = tmp_path / "scan.png"
        background.write_bytes(png_bytes)
        sample_template.background_image = str(background)
        path = tmp_path / "bg.json"
        path.write_text(serialize_template(sample_template), encoding="utf-8")

        written = export_file(path, ["pdf"], tmp_path / "out")

        doc = fitz.open(str(written[0]))
        assert len(doc[0].get_images()) == 1
