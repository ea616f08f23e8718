"""
Pytest fixtures for the template editor tests.

테스트 구성:
- 정상 케이스, 검증 실패 케이스 분리
- 생성 문서(PDF/DOCX)는 PyMuPDF / python-docx 로 직접 검사
"""

import base64
import io
from pathlib import Path
from typing import Any

import fitz
import pytest
import yaml
from docx import Document

from src.domain.schemas import Template, Variable, VariableFormat

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Template Fixtures
# =============================================================================

@pytest.fixture
def hello_variable() -> Variable:
    """(100, 100) 위치의 기본 서식 Variable."""
    return Variable(
        id="var-hello",
        title="Greeting",
        value="Hello",
        x=100,
        y=100,
        format=VariableFormat(),
    )


@pytest.fixture
def sample_template(hello_variable: Variable) -> Template:
    """a4, Variable 두 개."""
    return Template(
        id="tpl-sample",
        title="Invoice",
        page_size="a4",
        variables=[
            hello_variable,
            Variable(
                id="var-total",
                title="Total",
                value="$ 1,200",
                x=300,
                y=450,
                format=VariableFormat(
                    font_family="Times New Roman",
                    font_size=18,
                    font_weight="bold",
                    text_align="right",
                    color="#FF0000",
                ),
            ),
        ],
    )


@pytest.fixture
def sample_template_dict(sample_template: Template) -> dict[str, Any]:
    """sample_template 의 JSON 형태."""
    return sample_template.to_dict()


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def png_bytes() -> bytes:
    """작은 PNG 이미지 (8x8 회색)."""
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 8, 8), False)
    pix.clear_with(200)
    return pix.tobytes("png")


@pytest.fixture
def png_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def docx_bytes() -> bytes:
    """문단 두 개짜리 Word 문서."""
    doc = Document()
    doc.add_paragraph("First line")
    doc.add_paragraph("Second line")
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    """텍스트 한 줄짜리 PDF (600 x 800 pt)."""
    doc = fitz.open()
    page = doc.new_page(width=600, height=800)
    page.insert_text((72, 72), "Imported page")
    data = doc.tobytes()
    doc.close()
    return data
