"""
Editor State Machine: 선택 / 편집 / 드래그 / 모달 / 전체 삭제 확인.

상태:
- IDLE: 선택 없음
- SELECTED: 선택됨, 서식 편집 아님 (드래그 가능)
- EDITING: 선택 + 서식 툴바 활성
- 모달(CREATE/EDIT) 과 전체 삭제 확인은 상태와 직교하며 캔버스 입력을 막는다

규칙:
- 모든 전이는 동기, 단일 스레드. 이벤트 순서대로 적용
- 변경 후 항상 listener 호출 (render(model) → view 는 호출자 몫)
- 검증 실패는 변경 전에 EditorError 로 중단
- EDITING 중 서식/위치 변경은 기본적으로 draft 에 쌓이고 Save 에서 반영,
  Cancel 에서 폐기. live_edits=True 면 즉시 Template 에 반영 (Cancel 은
  되돌리지 않음)
"""

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.core.coordinates import CanvasSize, canvas_size, snap_to_grid
from src.core.ids import new_id
from src.core.serialize import create_new_template
from src.domain.constants import DEFAULT_VARIABLE_POSITION, GRID_SIZE, get_page_size
from src.domain.errors import EditorError, ErrorCodes
from src.domain.schemas import (
    PageSize,
    Template,
    Variable,
    VariableFormat,
    require_number,
    resolve_format_field,
    validate_format_value,
)

logger = logging.getLogger(__name__)


# =============================================================================
# State types
# =============================================================================

class EditorMode(str, Enum):
    """에디터 상태."""
    IDLE = "idle"
    SELECTED = "selected"
    EDITING = "editing"


class ModalKind(str, Enum):
    """Variable 추가/수정 모달 종류."""
    CREATE = "create"
    EDIT = "edit"


@dataclass
class ModalDraft:
    """모달에 입력 중인 값 (저장 전까지 Template 에 영향 없음)."""
    kind: ModalKind
    x: int | float
    y: int | float
    title: str = ""
    value: str = ""
    variable_id: str | None = None


@dataclass
class Notification:
    """사용자 알림 (toast)."""
    level: str  # success, error
    title: str
    description: str = ""


Listener = Callable[["EditorState"], None]

_MODAL_FIELDS = ("title", "value", "x", "y")


def _check_position(x: Any, y: Any) -> None:
    for name, value in (("x", x), ("y", y)):
        require_number(value, name)
        if value < 0:
            raise EditorError(
                ErrorCodes.VALIDATION_FAILED,
                field=name,
                message=f"{name} must be non-negative",
                value=value,
            )


# =============================================================================
# Editor State
# =============================================================================

class EditorState:
    """
    템플릿 에디터 상태 머신.

    Usage:
        state = EditorState()
        state.subscribe(lambda s: view.render(s))
        draft = state.click_canvas(137, 253)
        state.update_modal(title="Name", value="Hello")
        state.save_modal()
    """

    def __init__(
        self,
        template: Template | None = None,
        *,
        grid_size: int = GRID_SIZE,
        snap_enabled: bool = True,
        show_grid: bool = True,
        live_edits: bool = False,
        page_sizes: dict[str, PageSize] | None = None,
    ):
        self.template = template if template is not None else create_new_template()
        self.grid_size = grid_size
        self.snap_enabled = snap_enabled
        self.show_grid = show_grid
        self.live_edits = live_edits
        self.page_sizes = page_sizes

        self.mode = EditorMode.IDLE
        self.selected_variable_id: str | None = None
        self.modal: ModalDraft | None = None
        self.clear_confirm_pending = False
        self.dragging_variable_id: str | None = None
        self.notifications: list[Notification] = []

        self._draft: Variable | None = None
        self._listeners: list[Listener] = []

    # =========================================================================
    # Derived views
    # =========================================================================

    @property
    def canvas(self) -> CanvasSize:
        """현재 pageSize 의 캔버스 픽셀 크기 (저장하지 않고 매번 계산)."""
        return canvas_size(self.template.page_size, self.page_sizes)

    @property
    def page(self) -> PageSize:
        return get_page_size(self.template.page_size, self.page_sizes)

    @property
    def is_editing(self) -> bool:
        return self.mode == EditorMode.EDITING

    @property
    def is_canvas_blocked(self) -> bool:
        """모달 또는 확인 대화상자가 열려 있으면 True."""
        return self.modal is not None or self.clear_confirm_pending

    @property
    def selected_variable(self) -> Variable | None:
        """선택된 Variable (편집 중이면 draft 포함 값)."""
        if self.selected_variable_id is None:
            return None
        if self._draft is not None and self._draft.id == self.selected_variable_id:
            return self._draft
        return self.template.find_variable(self.selected_variable_id)

    @property
    def display_variables(self) -> list[Variable]:
        """뷰가 그릴 목록. 저장 전 draft 를 반영하며 순서는 Template 그대로."""
        if self._draft is None:
            return list(self.template.variables)
        return [
            self._draft if v.id == self._draft.id else v
            for v in self.template.variables
        ]

    @property
    def has_pending_edits(self) -> bool:
        if self._draft is None:
            return False
        committed = self.template.find_variable(self._draft.id)
        return committed != self._draft

    # =========================================================================
    # Notifications
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        모델 변경 알림 등록.

        Returns:
            등록 해제 함수
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def notify(self, level: str, title: str, description: str = "") -> Notification:
        notification = Notification(level=level, title=title, description=description)
        self.notifications.append(notification)
        return notification

    def dismiss_notifications(self) -> None:
        self.notifications.clear()

    # =========================================================================
    # Template-level
    # =========================================================================

    def _reset_interaction(self) -> None:
        self.mode = EditorMode.IDLE
        self.selected_variable_id = None
        self.modal = None
        self.clear_confirm_pending = False
        self.dragging_variable_id = None
        self._draft = None

    def new_template(self) -> Template:
        """현재 템플릿을 버리고 새 템플릿 시작."""
        self.template = create_new_template()
        self._reset_interaction()
        self._changed()
        return self.template

    def load_template(self, template: Template) -> None:
        self.template = template
        self._reset_interaction()
        self._changed()

    def set_title(self, title: str) -> None:
        self.template.title = title
        self._changed()

    def set_page_size(self, page_size_key: str) -> None:
        """pageSize 변경. 알 수 없는 키도 저장하며 조회 시 a4 로 대체된다."""
        self.template.page_size = page_size_key
        self._changed()

    def set_background_image(self, image: str | None) -> None:
        self.template.background_image = image
        self._changed()

    def set_show_background(self, show: bool) -> None:
        self.template.show_background_in_output = show
        self._changed()

    def toggle_grid(self) -> bool:
        self.show_grid = not self.show_grid
        self._changed()
        return self.show_grid

    def toggle_snap(self) -> bool:
        self.snap_enabled = not self.snap_enabled
        self._changed()
        return self.snap_enabled

    def _snap(self, value: float) -> int | float:
        return snap_to_grid(value, self.grid_size) if self.snap_enabled else value

    # =========================================================================
    # Modal (add / edit variable)
    # =========================================================================

    def click_canvas(self, x: float, y: float) -> ModalDraft | None:
        """
        빈 캔버스 클릭 → CREATE 모달 (스냅 켜져 있으면 스냅된 위치).

        편집 중이거나 모달/확인창이 열려 있으면 무시하고 None.
        """
        if self.is_editing or self.is_canvas_blocked:
            logger.debug("Canvas click ignored (editing or modal open)")
            return None

        self.modal = ModalDraft(
            kind=ModalKind.CREATE,
            x=self._snap(max(0, x)),
            y=self._snap(max(0, y)),
        )
        self._changed()
        return self.modal

    def open_add_modal(self) -> ModalDraft:
        """사이드바 "추가" → 기본 위치의 CREATE 모달."""
        x, y = DEFAULT_VARIABLE_POSITION
        self.modal = ModalDraft(kind=ModalKind.CREATE, x=x, y=y)
        self._changed()
        return self.modal

    def open_edit_modal(self, variable_id: str) -> ModalDraft:
        variable = self._require_variable(variable_id)
        self.modal = ModalDraft(
            kind=ModalKind.EDIT,
            x=variable.x,
            y=variable.y,
            title=variable.title,
            value=variable.value,
            variable_id=variable.id,
        )
        self._changed()
        return self.modal

    def update_modal(self, **fields: Any) -> ModalDraft:
        """
        모달 입력값 변경 (title, value, x, y).

        타입이 맞지 않으면 draft 변경 없이 VALIDATION_FAILED.
        """
        if self.modal is None:
            raise EditorError(ErrorCodes.INVALID_STATE, message="No modal is open")
        for name, value in fields.items():
            if name not in _MODAL_FIELDS:
                raise EditorError(
                    ErrorCodes.VALIDATION_FAILED,
                    field=name,
                    message=f"Unknown modal field: {name}",
                )
            if name in ("x", "y"):
                require_number(value, name)
            elif not isinstance(value, str):
                raise EditorError(
                    ErrorCodes.VALIDATION_FAILED,
                    field=name,
                    message=f"{name} must be a string",
                )
        for name, value in fields.items():
            setattr(self.modal, name, value)
        self._changed()
        return self.modal

    def save_modal(self) -> Variable:
        """
        모달 저장.

        - title / value 필수 (공백 제거 후 비어 있으면 에러, 변경 없음)
        - CREATE: 새 id + 기본 서식으로 추가, IDLE 로
        - EDIT: 기존 Variable 의 title / value / x / y 교체

        Raises:
            EditorError: INVALID_STATE, VALIDATION_FAILED, VARIABLE_NOT_FOUND
        """
        draft = self.modal
        if draft is None:
            raise EditorError(ErrorCodes.INVALID_STATE, message="No modal is open")

        title = draft.title.strip()
        value = draft.value.strip()
        if not title or not value:
            raise EditorError(
                ErrorCodes.VALIDATION_FAILED,
                field="title" if not title else "value",
                message="Title and value are required",
            )
        _check_position(draft.x, draft.y)

        if draft.kind == ModalKind.CREATE:
            variable = Variable(
                id=new_id(),
                title=title,
                value=value,
                x=draft.x,
                y=draft.y,
                format=VariableFormat(),
            )
            self.template.variables.append(variable)
            if not self.is_editing:
                self.mode = EditorMode.IDLE
                self.selected_variable_id = None
            self.notify("success", "Variable added", f'"{title}" has been added to the template.')
        else:
            existing = self._require_variable(draft.variable_id or "")
            variable = copy.deepcopy(existing)
            variable.title = title
            variable.value = value
            variable.x = draft.x
            variable.y = draft.y
            self._apply_update(variable)
            if self._draft is not None and self._draft.id == variable.id:
                self._draft.title = title
                self._draft.value = value
                self._draft.x = draft.x
                self._draft.y = draft.y
            self.notify("success", "Variable updated", f'"{title}" has been updated.')

        self.modal = None
        self._changed()
        return variable

    def close_modal(self) -> None:
        """모달 닫기. draft 만 버리고 Template 은 그대로."""
        self.modal = None
        self._changed()

    # =========================================================================
    # Selection / Editing
    # =========================================================================

    def click_variable(self, variable_id: str) -> bool:
        """
        Variable 클릭 → 선택 후 바로 EDITING.

        모달/확인창이 열려 있으면 무시 (False).
        다른 Variable 편집 중이었다면 저장되지 않은 draft 는 버린다.
        """
        if self.is_canvas_blocked:
            return False

        variable = self._require_variable(variable_id)
        if self.has_pending_edits and self._draft is not None and self._draft.id != variable_id:
            logger.info(f"Discarding unsaved edits of variable {self._draft.id}")

        self.selected_variable_id = variable.id
        self._draft = copy.deepcopy(variable)
        self.mode = EditorMode.EDITING
        self._changed()
        return True

    def _require_editing(self) -> Variable:
        if not self.is_editing or self._draft is None:
            raise EditorError(ErrorCodes.INVALID_STATE, message="No variable is being edited")
        return self._draft

    def _stage(self, draft: Variable) -> None:
        if self.live_edits:
            self._apply_update(copy.deepcopy(draft))
        self._changed()

    def set_format(self, name: str, value: Any) -> Variable:
        """
        선택된 Variable 서식 변경.

        Args:
            name: 필드명 (fontWeight / font_weight 둘 다 허용)
            value: 새 값 (선택 필드는 None 으로 해제)
        """
        draft = self._require_editing()
        attr = resolve_format_field(name)
        setattr(draft.format, attr, validate_format_value(attr, value))
        self._stage(draft)
        return draft

    def toggle_format(self, name: str, on_value: str) -> Variable:
        """
        서식 토글 (bold / italic / underline / textAlign).

        현재 값이 on_value 면 해제(None), 아니면 on_value.
        두 번 토글하면 원래 값(미설정)으로 돌아온다.
        """
        draft = self._require_editing()
        attr = resolve_format_field(name)
        current = getattr(draft.format, attr)
        new_value = None if current == on_value else on_value
        setattr(draft.format, attr, validate_format_value(attr, new_value))
        self._stage(draft)
        return draft

    def set_position(self, x: float, y: float) -> Variable:
        """툴바의 X / Y 입력."""
        draft = self._require_editing()
        _check_position(x, y)
        draft.x = x
        draft.y = y
        self._stage(draft)
        return draft

    def save_editing(self) -> Variable:
        """
        편집 저장 → SELECTED (선택 유지).

        staged 모드면 여기서 Template 에 반영.
        """
        draft = self._require_editing()
        self._apply_update(copy.deepcopy(draft))
        self._draft = None
        self.mode = EditorMode.SELECTED
        self.notify("success", "Variable updated", "Your changes have been saved.")
        self._changed()
        return self._require_variable(draft.id)

    def cancel_editing(self) -> None:
        """편집 취소 → IDLE, 선택 해제. staged 변경은 폐기."""
        if self.has_pending_edits and self.live_edits:
            logger.debug("Cancel does not revert live edits")
        self._draft = None
        self.selected_variable_id = None
        self.mode = EditorMode.IDLE
        self._changed()

    # =========================================================================
    # Drag
    # =========================================================================

    def begin_drag(self, variable_id: str) -> bool:
        """
        드래그 시작. 편집 중이거나 모달이 열려 있으면 무시 (False).

        드래그된 Variable 이 선택되고 SELECTED 가 된다.
        """
        if self.is_editing or self.is_canvas_blocked:
            return False

        variable = self._require_variable(variable_id)
        self.selected_variable_id = variable.id
        self.mode = EditorMode.SELECTED
        self.dragging_variable_id = variable.id
        self._changed()
        return True

    def drag_to(self, x: float, y: float) -> Variable | None:
        """드래그 중 위치 갱신 (연속, 음수는 0 으로, 숫자가 아니거나 무한대면 에러)."""
        if self.dragging_variable_id is None:
            return None
        require_number(x, "x")
        require_number(y, "y")
        variable = copy.deepcopy(self._require_variable(self.dragging_variable_id))
        variable.x = max(0, x)
        variable.y = max(0, y)
        self._apply_update(variable)
        self._changed()
        return variable

    def end_drag(self) -> Variable | None:
        """드래그 종료. 스냅 켜져 있으면 gridSize 배수로 반올림 후 반영."""
        if self.dragging_variable_id is None:
            return None
        variable = copy.deepcopy(self._require_variable(self.dragging_variable_id))
        variable.x = self._snap(variable.x)
        variable.y = self._snap(variable.y)
        self._apply_update(variable)
        self.dragging_variable_id = None
        self._changed()
        return variable

    # =========================================================================
    # Delete / Clear
    # =========================================================================

    def delete_variable(self, variable_id: str) -> Variable:
        """Variable 삭제. 선택돼 있었다면 IDLE 로."""
        index = self.template.variable_index(variable_id)
        if index < 0:
            raise EditorError(
                ErrorCodes.VARIABLE_NOT_FOUND,
                variable_id=variable_id,
                message="Variable not found",
            )

        removed = self.template.variables.pop(index)
        if self.selected_variable_id == variable_id:
            self.selected_variable_id = None
            self.mode = EditorMode.IDLE
            self._draft = None
        if self.dragging_variable_id == variable_id:
            self.dragging_variable_id = None

        self.notify("success", "Variable deleted", "The variable has been removed from the template.")
        self._changed()
        return removed

    def request_clear_variables(self) -> None:
        """전체 삭제 확인창 열기 (아직 변경 없음)."""
        self.clear_confirm_pending = True
        self._changed()

    def confirm_clear_variables(self) -> None:
        """
        확인 후 전체 삭제 → IDLE.

        Raises:
            EditorError: INVALID_STATE (확인창이 열려 있지 않음)
        """
        if not self.clear_confirm_pending:
            raise EditorError(
                ErrorCodes.INVALID_STATE,
                message="Clearing variables requires confirmation",
            )
        self.template.variables = []
        self.clear_confirm_pending = False
        self.selected_variable_id = None
        self.dragging_variable_id = None
        self._draft = None
        self.mode = EditorMode.IDLE
        self.notify("success", "Variables cleared", "All variables have been removed from the template.")
        self._changed()

    def decline_clear_variables(self) -> None:
        self.clear_confirm_pending = False
        self._changed()

    # =========================================================================
    # Internal
    # =========================================================================

    def _require_variable(self, variable_id: str) -> Variable:
        variable = self.template.find_variable(variable_id)
        if variable is None:
            raise EditorError(
                ErrorCodes.VARIABLE_NOT_FOUND,
                variable_id=variable_id,
                message="Variable not found",
            )
        return variable

    def _apply_update(self, variable: Variable) -> None:
        """id 가 같은 Variable 을 교체 (서식/드래그/모달 공통 경로)."""
        index = self.template.variable_index(variable.id)
        if index < 0:
            raise EditorError(
                ErrorCodes.VARIABLE_NOT_FOUND,
                variable_id=variable.id,
                message="Variable not found",
            )
        self.template.variables[index] = variable
