"""
Template 직렬화 / 생성 헬퍼 / 원자적 JSON 쓰기.

규칙:
- serialize_template: 2칸 들여쓰기 pretty-print (JSON 내보내기와 동일 포맷)
- deserialize_template: 파싱 + 검증, 실패 시 EditorError(INVALID_TEMPLATE)
  (조용히 새 템플릿으로 대체하지 않음)
- deserialize(serialize(t)) == t
- 원자적 쓰기: temp → rename + fsync
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from src.core.ids import new_id
from src.domain.errors import EditorError, ErrorCodes
from src.domain.schemas import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_TEMPLATE_TITLE,
    Template,
    Variable,
    VariableFormat,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Factories
# =============================================================================

def create_new_template() -> Template:
    """기본값으로 새 Template 생성 (빈 variables)."""
    return Template(
        id=new_id(),
        title=DEFAULT_TEMPLATE_TITLE,
        page_size=DEFAULT_PAGE_SIZE,
        show_background_in_output=True,
        variables=[],
    )


def create_new_variable(x: float, y: float) -> Variable:
    """
    기본 서식의 새 Variable 생성.

    title/value 는 빈 문자열 (모달에서 채운 뒤 저장 시 검증).
    """
    return Variable(
        id=new_id(),
        title="",
        value="",
        x=x,
        y=y,
        format=VariableFormat(),
    )


# =============================================================================
# Serialize / Deserialize
# =============================================================================

def serialize_template(template: Template) -> str:
    """Template → pretty JSON 문자열."""
    return json.dumps(template.to_dict(), indent=2, ensure_ascii=False)


def deserialize_template(data: str | bytes) -> Template:
    """
    JSON 문자열 → Template.

    Raises:
        EditorError: INVALID_TEMPLATE (JSON 파싱 실패),
                     VALIDATION_FAILED / DUPLICATE_VARIABLE_ID (검증 실패)
    """
    try:
        raw: Any = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Failed to deserialize template: {e}")
        raise EditorError(
            ErrorCodes.INVALID_TEMPLATE,
            message="Template data is not valid JSON",
            error=str(e),
        ) from e

    return Template.from_dict(raw)


def load_template_file(path: Path) -> Template:
    """JSON 템플릿 파일 로드."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise EditorError(
            ErrorCodes.IMPORT_FAILED,
            message="Failed to read template file",
            path=str(path),
            error=str(e),
        ) from e
    return deserialize_template(text)


# =============================================================================
# Atomic Write
# =============================================================================

def _fsync_dir(dir_path: Path) -> None:
    """디렉토리 fsync (rename 엔트리 내구성). 미지원 환경은 경고만."""
    try:
        fd = os.open(dir_path, os.O_RDONLY)
    except OSError as e:
        logger.warning(f"Directory open for fsync failed for {dir_path}: {e}")
        return
    try:
        os.fsync(fd)
    except OSError as e:
        logger.warning(f"Directory fsync failed for {dir_path}: {e}")
    finally:
        os.close(fd)


def atomic_write_json(path: Path, data: Any) -> None:
    """
    원자적 JSON 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - 파일 fsync + 디렉토리 fsync (실패 시 경고 후 계속)
    - 실패 시 temp 파일 삭제, 기존 파일 보존

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            temp_path.unlink()
        raise
