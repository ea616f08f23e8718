"""
test_editor_to_export.py - 편집 → 저장 → 내보내기 통합 테스트

흐름:
1. EditorState 로 Variable 배치 / 서식 변경
2. EditorSession 으로 로컬 저장 후 다시 불러오기
3. PDF / Word / JSON 내보내기 결과 검사
4. 같은 템플릿을 HTTP API 로 저장 / 내보내기
"""

import io
import json
from pathlib import Path

import fitz
import pytest
from docx import Document
from docx.shared import Pt
from fastapi.testclient import TestClient

from src.app.main import create_app
from src.core.coordinates import canvas_size
from src.editor.session import EditorSession
from src.editor.state import EditorState
from src.templates.store import LocalTemplateStore


@pytest.fixture
def session(tmp_path: Path) -> EditorSession:
    return EditorSession(EditorState(), LocalTemplateStore(tmp_path / "storage.json"))


def _build_letter(session: EditorSession) -> None:
    """letter 템플릿: 캔버스 중앙 (스냅) 에 굵은 "Hello"."""
    state = session.state
    state.set_title("Welcome")
    state.set_page_size("letter")

    center = canvas_size("letter")
    state.click_canvas(center.width / 2, center.height / 2)
    state.update_modal(title="Greeting", value="Hello")
    variable = state.save_modal()

    state.click_variable(variable.id)
    state.toggle_format("fontWeight", "bold")
    state.set_format("fontSize", 16)
    state.save_editing()


class TestEditorToExport:
    """에디터 → 파일 내보내기."""

    def test_full_flow(self, session: EditorSession, tmp_path: Path):
        """편집 → 저장 → 새 템플릿 → 불러오기 → 내보내기."""
        _build_letter(session)
        saved = session.state.template
        assert session.save_template()

        session.state.new_template()
        assert session.load_template() == saved

        out = tmp_path / "out"
        pdf_path = session.export("pdf", out)
        docx_path = session.export("docx", out)
        json_path = session.export("json", out)

        # PDF: letter 크기, 스냅된 위치의 굵은 텍스트
        variable = saved.variables[0]
        canvas = canvas_size("letter")
        page = fitz.open(str(pdf_path))[0]
        assert (page.rect.width, page.rect.height) == pytest.approx((612, 792))
        span = page.get_text("dict")["blocks"][0]["lines"][0]["spans"][0]
        assert span["text"] == "Hello"
        assert "Bold" in span["font"]
        assert span["origin"][0] == pytest.approx(variable.x / canvas.width * 612, abs=0.5)
        assert span["origin"][1] == pytest.approx(variable.y / canvas.height * 792, abs=0.5)

        # Word: 굵은 16pt 문단
        run = [p for p in Document(str(docx_path)).paragraphs if p.text][0].runs[0]
        assert run.bold is True
        assert run.font.size == Pt(16)

        # JSON: 무손실
        assert json.loads(json_path.read_text(encoding="utf-8")) == saved.to_dict()

    def test_cancelled_edit_not_exported(self, session: EditorSession, tmp_path: Path):
        """Cancel 한 서식은 내보내기에 반영되지 않음."""
        _build_letter(session)
        variable_id = session.state.template.variables[0].id

        session.state.click_variable(variable_id)
        session.state.set_format("fontSize", 48)
        session.state.cancel_editing()

        path = session.export("docx", tmp_path)

        run = [p for p in Document(str(path)).paragraphs if p.text][0].runs[0]
        assert run.font.size == Pt(16)


class TestEditorToApi:
    """에디터 → HTTP API 저장 / 내보내기."""

    def test_save_and_export_via_api(self, session: EditorSession, tmp_path: Path):
        """에디터 템플릿을 API 로 저장 후 Word 다운로드."""
        _build_letter(session)
        app = create_app({"uploads": {"dir": "uploads"}}, base_dir=tmp_path)

        with TestClient(app) as client:
            created = client.post("/api/templates", json=session.state.template.to_dict()).json()
            response = client.get(f"/api/templates/{created['id']}/export/docx")

        assert response.status_code == 200
        doc = Document(io.BytesIO(response.content))
        assert [p.text for p in doc.paragraphs if p.text] == ["Hello"]
