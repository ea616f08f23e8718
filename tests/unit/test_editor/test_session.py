"""
test_session.py - 에디터 세션 테스트

DoD:
- 저장 / 불러오기 (최근, id 지정)
- 내보내기: {title}.{ext} 파일 생성
- 가져오기: 텍스트 → 새 Variable (파일명 제목, 기본 위치), 이미지 → 배경
- 실패는 error 알림, 모델 변경 없음
"""

import copy
import json
from pathlib import Path

import pytest

from src.core.serialize import serialize_template
from src.editor.session import EditorSession
from src.editor.state import EditorState
from src.templates.store import LocalTemplateStore

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store(tmp_path: Path) -> LocalTemplateStore:
    return LocalTemplateStore(tmp_path / "local" / "storage.json")


@pytest.fixture
def session(store: LocalTemplateStore, sample_template) -> EditorSession:
    return EditorSession(EditorState(copy.deepcopy(sample_template)), store)


# =============================================================================
# Save / Load
# =============================================================================


class TestSaveLoad:
    """저장 / 불러오기."""

    def test_save(self, session, store):
        """저장 → success 알림, current 로도 저장."""
        assert session.save_template()

        assert store.get("tpl-sample") == session.state.template
        assert store.get_current() == session.state.template
        assert session.state.notifications[-1].level == "success"

    def test_load_latest(self, session):
        """최근 저장 템플릿 불러오기."""
        session.save_template()
        session.state.new_template()

        loaded = session.load_template()

        assert loaded.id == "tpl-sample"
        assert session.state.template.id == "tpl-sample"

    def test_load_by_id(self, session):
        """id 지정 불러오기."""
        session.save_template()
        first_id = session.state.template.id
        session.state.new_template()
        session.save_template()

        loaded = session.load_template(first_id)

        assert loaded.id == first_id

    def test_load_empty_store(self, session):
        """저장된 템플릿 없음 → error 알림, 템플릿 유지."""
        assert session.load_template() is None

        assert session.state.template.id == "tpl-sample"
        assert session.state.notifications[-1].level == "error"

    def test_load_corrupt_store(self, session, store):
        """깨진 저장소 → error 알림."""
        store.path.parent.mkdir(parents=True, exist_ok=True)
        store.path.write_text("{broken", encoding="utf-8")

        assert session.load_template() is None
        assert session.state.notifications[-1].level == "error"

    def test_load_template_file(self, session, tmp_path: Path, sample_template):
        """JSON 파일 열기."""
        sample_template.title = "From file"
        path = tmp_path / "template.json"
        path.write_text(serialize_template(sample_template), encoding="utf-8")
        session.state.new_template()

        loaded = session.load_template_file(path)

        assert loaded.title == "From file"
        assert session.state.template == sample_template

    def test_load_invalid_template_file(self, session, tmp_path: Path):
        """잘못된 파일 → error 알림, 템플릿 유지."""
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")

        assert session.load_template_file(path) is None
        assert session.state.template.id == "tpl-sample"
        assert session.state.notifications[-1].level == "error"


# =============================================================================
# Export
# =============================================================================


class TestExport:
    """내보내기."""

    @pytest.mark.parametrize("fmt", ["pdf", "docx", "json"])
    def test_writes_file(self, session, tmp_path: Path, fmt):
        """{title}.{ext} 생성."""
        path = session.export(fmt, tmp_path / "out")

        assert path == tmp_path / "out" / f"Invoice.{fmt}"
        assert path.stat().st_size > 0

    def test_json_export_is_lossless(self, session, tmp_path: Path):
        """JSON 내보내기 == 직렬화."""
        path = session.export("json", tmp_path)

        assert json.loads(path.read_text(encoding="utf-8")) == session.state.template.to_dict()

    def test_empty_title_uses_document(self, session, tmp_path: Path):
        """제목 없음 → document.{ext}."""
        session.state.set_title("")

        assert session.export("json", tmp_path).name == "document.json"

    def test_unsupported_format(self, session, tmp_path: Path):
        """알 수 없는 포맷 → error 알림, 파일 없음."""
        assert session.export("rtf", tmp_path) is None

        assert list(tmp_path.iterdir()) == []
        assert session.state.notifications[-1].level == "error"

    def test_bad_background(self, session, tmp_path: Path):
        """배경 디코딩 실패 → error 알림."""
        session.state.set_background_image("data:image/png;base64,!!!")

        assert session.export("pdf", tmp_path) is None
        assert session.state.notifications[-1].level == "error"


# =============================================================================
# Import
# =============================================================================


class TestImport:
    """파일 가져오기."""

    def test_docx_becomes_variable(self, session, tmp_path: Path, docx_bytes: bytes):
        """Word → 파일명 제목의 새 Variable (100, 100)."""
        path = tmp_path / "letter body.docx"
        path.write_bytes(docx_bytes)

        result = session.import_file(path)

        assert result.type == "text"
        variable = session.state.template.variables[-1]
        assert variable.title == "letter body"
        assert variable.value == "First line\nSecond line"
        assert (variable.x, variable.y) == (100, 100)
        assert session.state.modal is None

    def test_image_becomes_background(self, session, tmp_path: Path, png_bytes: bytes):
        """이미지 → 배경."""
        path = tmp_path / "scan.png"
        path.write_bytes(png_bytes)

        result = session.import_file(path)

        assert result.type == "image"
        assert session.state.template.background_image.startswith("data:image/png;base64,")

    def test_pdf_becomes_background(self, session, tmp_path: Path, pdf_bytes: bytes):
        """PDF → 첫 페이지 이미지 배경."""
        path = tmp_path / "form.pdf"
        path.write_bytes(pdf_bytes)

        session.import_file(path)

        assert session.state.template.background_image.startswith("data:image/png;base64,")

    def test_unsupported(self, session, tmp_path: Path):
        """지원하지 않는 파일 → error 알림, 변경 없음."""
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")
        before = copy.deepcopy(session.state.template)

        assert session.import_file(path) is None
        assert session.state.template == before
        assert session.state.notifications[-1].level == "error"

    def test_empty_docx_rejected(self, session, tmp_path: Path):
        """빈 문서 → 값 없음 에러, 모달 닫힘."""
        from docx import Document

        path = tmp_path / "empty.docx"
        Document().save(str(path))
        count = len(session.state.template.variables)

        assert session.import_file(path) is None
        assert len(session.state.template.variables) == count
        assert session.state.modal is None
