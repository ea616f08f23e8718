"""
Data schemas for the template editor.

규칙:
- 필드명 통일: JSON 직렬화 키는 camelCase (fontFamily, pageSize, ...)
- Variable.x / Variable.y 는 캔버스 픽셀 좌표 (물리 단위 아님)
- Template 은 Variable 목록을 독점 소유, Variable.id 는 Template 내 유일
- 검증 실패 → EditorError(VALIDATION_FAILED), 모델 변경 전에 발생
"""

from dataclasses import dataclass, field
from typing import Any

from src.domain.errors import EditorError, ErrorCodes

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_TEMPLATE_TITLE = "Untitled Document"
DEFAULT_PAGE_SIZE = "a4"
DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE = 12
DEFAULT_COLOR = "#000000"

# 선택 필드 허용값 (미설정 = None = normal)
FONT_WEIGHTS = ("bold", "normal")
FONT_STYLES = ("italic", "normal")
TEXT_DECORATIONS = ("underline", "none")
TEXT_ALIGNS = ("left", "center", "right", "justify")

# JSON 키 → 속성명
FORMAT_FIELD_NAMES = {
    "fontFamily": "font_family",
    "fontSize": "font_size",
    "fontWeight": "font_weight",
    "fontStyle": "font_style",
    "textDecoration": "text_decoration",
    "textAlign": "text_align",
    "color": "color",
}

_OPTIONAL_FORMAT_VALUES = {
    "font_weight": FONT_WEIGHTS,
    "font_style": FONT_STYLES,
    "text_decoration": TEXT_DECORATIONS,
    "text_align": TEXT_ALIGNS,
}


# =============================================================================
# Validation helpers
# =============================================================================

def _invalid(field_name: str, message: str, **context: Any) -> EditorError:
    return EditorError(
        ErrorCodes.VALIDATION_FAILED,
        field=field_name,
        message=message,
        **context,
    )


def _require_text(data: dict[str, Any], key: str, *, allow_empty: bool = False) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise _invalid(key, f"{key} must be a string")
    if not allow_empty and not value.strip():
        raise _invalid(key, f"{key} is required")
    return value


def require_number(value: Any, key: str) -> int | float:
    # bool 은 int 의 하위 타입이므로 명시적으로 제외
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid(key, f"{key} must be a number", value=value)
    if value != value or value in (float("inf"), float("-inf")):
        raise _invalid(key, f"{key} must be finite", value=value)
    return value


def resolve_format_field(name: str) -> str:
    """
    포맷 필드명 정규화 (camelCase / snake_case 모두 허용).

    Raises:
        EditorError: VALIDATION_FAILED (알 수 없는 필드)
    """
    if name in FORMAT_FIELD_NAMES:
        return FORMAT_FIELD_NAMES[name]
    if name in FORMAT_FIELD_NAMES.values():
        return name
    raise _invalid(name, f"Unknown format field: {name}")


def validate_format_value(attr: str, value: Any) -> Any:
    """포맷 필드 단일 값 검증. 통과한 값을 그대로 반환."""
    if attr == "font_family":
        if not isinstance(value, str) or not value.strip():
            raise _invalid("fontFamily", "fontFamily must be a non-empty string")
        return value
    if attr == "font_size":
        size = require_number(value, "fontSize")
        if size <= 0:
            raise _invalid("fontSize", "fontSize must be positive", value=size)
        return size
    if attr == "color":
        if not isinstance(value, str) or not value:
            raise _invalid("color", "color must be a string")
        return value
    if value is None:
        return None
    allowed = _OPTIONAL_FORMAT_VALUES[attr]
    if value not in allowed:
        raise _invalid(attr, f"{attr} must be one of {allowed}", value=value)
    return value


# =============================================================================
# Page Size
# =============================================================================

@dataclass(frozen=True)
class PageSize:
    """물리 페이지 크기 (불변)."""
    key: str
    label: str
    width: float
    height: float
    unit: str  # mm, in

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "width": self.width,
            "height": self.height,
            "unit": self.unit,
        }


# =============================================================================
# Variable
# =============================================================================

@dataclass
class VariableFormat:
    """Variable 서식. 선택 필드는 None = 미설정(normal)."""
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: int | float = DEFAULT_FONT_SIZE
    font_weight: str | None = None
    font_style: str | None = None
    text_decoration: str | None = None
    text_align: str | None = None
    color: str = DEFAULT_COLOR

    @property
    def is_bold(self) -> bool:
        return self.font_weight == "bold"

    @property
    def is_italic(self) -> bool:
        return self.font_style == "italic"

    @property
    def is_underline(self) -> bool:
        return self.text_decoration == "underline"

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용 (미설정 선택 필드는 생략)."""
        data: dict[str, Any] = {}
        for key, attr in FORMAT_FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "VariableFormat":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise _invalid("format", "format must be an object")

        values: dict[str, Any] = {}
        for key, attr in FORMAT_FIELD_NAMES.items():
            if key in data and data[key] is not None:
                values[attr] = validate_format_value(attr, data[key])
        return cls(**values)


@dataclass
class Variable:
    """템플릿 위에 배치된 서식 있는 텍스트 하나."""
    id: str
    title: str
    value: str
    x: int | float
    y: int | float
    format: VariableFormat = field(default_factory=VariableFormat)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "value": self.value,
            "x": self.x,
            "y": self.y,
            "format": self.format.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Variable":
        if not isinstance(data, dict):
            raise _invalid("variable", "variable must be an object")

        variable_id = _require_text(data, "id")
        x = require_number(data.get("x"), "x")
        y = require_number(data.get("y"), "y")
        if x < 0 or y < 0:
            raise _invalid("position", "x and y must be non-negative", x=x, y=y)

        return cls(
            id=variable_id,
            title=_require_text(data, "title"),
            value=_require_text(data, "value"),
            x=x,
            y=y,
            format=VariableFormat.from_dict(data.get("format")),
        )


# =============================================================================
# Template
# =============================================================================

@dataclass
class Template:
    """
    문서 템플릿.

    pageSize 는 PAGE_SIZES 키. 알 수 없는 키는 조회 시 a4 로 대체되며
    저장된 값은 바꾸지 않는다. 캔버스 픽셀 크기는 저장하지 않음
    (항상 pageSize 에서 계산).
    """
    id: str
    title: str = DEFAULT_TEMPLATE_TITLE
    page_size: str = DEFAULT_PAGE_SIZE
    background_image: str | None = None
    show_background_in_output: bool = True
    variables: list[Variable] = field(default_factory=list)

    def find_variable(self, variable_id: str) -> Variable | None:
        for variable in self.variables:
            if variable.id == variable_id:
                return variable
        return None

    def variable_index(self, variable_id: str) -> int:
        """Variable 위치 (없으면 -1)."""
        for index, variable in enumerate(self.variables):
            if variable.id == variable_id:
                return index
        return -1

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "pageSize": self.page_size,
        }
        if self.background_image is not None:
            data["backgroundImage"] = self.background_image
        data["showBackgroundInOutput"] = self.show_background_in_output
        data["variables"] = [v.to_dict() for v in self.variables]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Template":
        """
        dict → Template (기본값 적용 + 검증).

        Raises:
            EditorError: VALIDATION_FAILED, DUPLICATE_VARIABLE_ID
        """
        if not isinstance(data, dict):
            raise _invalid("template", "template must be an object")

        template_id = _require_text(data, "id")

        title = data.get("title", DEFAULT_TEMPLATE_TITLE)
        if not isinstance(title, str):
            raise _invalid("title", "title must be a string")

        page_size = data.get("pageSize") or DEFAULT_PAGE_SIZE
        if not isinstance(page_size, str):
            raise _invalid("pageSize", "pageSize must be a string")

        background_image = data.get("backgroundImage")
        if background_image is not None and not isinstance(background_image, str):
            raise _invalid("backgroundImage", "backgroundImage must be a string")

        show_background = data.get("showBackgroundInOutput", True)
        if not isinstance(show_background, bool):
            raise _invalid("showBackgroundInOutput", "showBackgroundInOutput must be a boolean")

        raw_variables = data.get("variables") or []
        if not isinstance(raw_variables, list):
            raise _invalid("variables", "variables must be a list")
        variables = [Variable.from_dict(v) for v in raw_variables]

        seen: set[str] = set()
        for variable in variables:
            if variable.id in seen:
                raise EditorError(
                    ErrorCodes.DUPLICATE_VARIABLE_ID,
                    variable_id=variable.id,
                    message=f"Duplicate variable id: {variable.id}",
                )
            seen.add(variable.id)

        return cls(
            id=template_id,
            title=title,
            page_size=page_size,
            background_image=background_image,
            show_background_in_output=show_background,
            variables=variables,
        )
