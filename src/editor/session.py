"""
Editor Session: EditorState + 로컬 저장소 + 렌더러 + 가져오기.

규칙:
- 모든 실패는 로그 + error 알림, 성공은 success 알림
- 실패 시 모델은 변경하지 않음
- 예외를 호출자에게 던지지 않음 (반환값 None / False 로 표시)
"""

import logging
from pathlib import Path

from src.app.services.importer import ImportResult, import_path
from src.core.serialize import load_template_file
from src.domain.errors import EditorError
from src.domain.schemas import Template
from src.editor.state import EditorState
from src.render.exporter import export_template, normalize_format
from src.render.images import ImageLoader, make_image_loader
from src.templates.store import LocalTemplateStore

logger = logging.getLogger(__name__)


class EditorSession:
    """
    사용자 하나의 편집 세션.

    Usage:
        session = EditorSession(EditorState(), LocalTemplateStore(path))
        session.save_template()
        session.export("pdf", Path("out"))
    """

    def __init__(
        self,
        state: EditorState,
        store: LocalTemplateStore,
        image_loader: ImageLoader | None = None,
    ):
        self.state = state
        self.store = store
        self.image_loader = image_loader or make_image_loader(allow_paths=True)

    def _fail(self, title: str, error: Exception) -> None:
        logger.error(f"{title}: {error}")
        description = error.message if isinstance(error, EditorError) else str(error)
        self.state.notify("error", title, description)

    # =========================================================================
    # Persistence
    # =========================================================================

    def save_template(self) -> bool:
        """현재 템플릿을 로컬 저장소에 저장 (같은 id 는 교체)."""
        template = self.state.template
        try:
            self.store.save(template)
        except EditorError as e:
            self._fail("Failed to save template", e)
            return False

        logger.info(f"Template saved: {template.id}")
        self.state.notify("success", "Template saved", "Your template has been saved successfully.")
        return True

    def load_template(self, template_id: str | None = None) -> Template | None:
        """
        저장된 템플릿 불러오기.

        Args:
            template_id: 없으면 가장 마지막에 저장된 템플릿
        """
        try:
            template = self.store.get(template_id) if template_id else self.store.latest()
        except EditorError as e:
            self._fail("Failed to load template", e)
            return None

        if template is None:
            logger.warning(f"No saved template to load (id={template_id})")
            self.state.notify("error", "No templates found", "Save a template first.")
            return None

        self.state.load_template(template)
        self.state.notify("success", "Template loaded", f'"{template.title}" has been loaded.')
        return template

    def load_template_file(self, path: Path) -> Template | None:
        """JSON 템플릿 파일 열기."""
        try:
            template = load_template_file(path)
        except EditorError as e:
            self._fail("Failed to open template file", e)
            return None

        self.state.load_template(template)
        self.state.notify("success", "Template loaded", f'"{template.title}" has been loaded.')
        return template

    # =========================================================================
    # Export / Import
    # =========================================================================

    def export(self, fmt: str, directory: Path) -> Path | None:
        """
        현재 템플릿 내보내기 → directory/{title or 'document'}.{ext}

        Returns:
            저장된 파일 경로 (실패 시 None)
        """
        try:
            normalized = normalize_format(fmt)
            artifact = export_template(
                self.state.template,
                normalized,
                image_loader=self.image_loader,
                page_sizes=self.state.page_sizes,
            )
            path = artifact.save(directory)
        except (EditorError, OSError) as e:
            self._fail(f"Failed to export {fmt}", e)
            return None

        logger.info(f"Exported {normalized}: {path}")
        self.state.notify("success", "Export complete", f"Saved {path.name}")
        return path

    def import_file(self, path: Path) -> ImportResult | None:
        """
        파일 가져오기.

        - text: 파일명을 제목으로 기본 위치에 새 Variable
        - image: 배경 이미지로 설정
        """
        try:
            result = import_path(path)
            if result.type == "text":
                self.state.open_add_modal()
                self.state.update_modal(title=path.stem, value=result.content)
                self.state.save_modal()
            else:
                self.state.set_background_image(result.content)
        except EditorError as e:
            if self.state.modal is not None:
                self.state.close_modal()
            self._fail("Failed to import file", e)
            return None

        logger.info(f"Imported {path.name} as {result.type}")
        self.state.notify("success", "Import complete", f"{path.name} has been imported.")
        return result
