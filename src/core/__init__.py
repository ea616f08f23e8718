"""
Core layer: 좌표 변환, 직렬화, ID.

이 모듈의 산술(2.83 배율, 비율 변환)은 내보내기 결과와 맞물려 있음
→ 가장 보수적으로 관리

역할:
- 캔버스 픽셀 ↔ 물리 단위 변환, 스냅
- Template JSON 직렬화 / 원자적 쓰기
- ID 발급
"""

from .coordinates import (
    CanvasSize,
    PhysicalPoint,
    canvas_size,
    canvas_size_for,
    page_orientation,
    snap_to_grid,
    to_physical,
)
from .ids import generate_upload_filename, new_id, safe_export_name
from .serialize import (
    atomic_write_json,
    create_new_template,
    create_new_variable,
    deserialize_template,
    load_template_file,
    serialize_template,
)

__all__ = [
    # coordinates
    "CanvasSize",
    "PhysicalPoint",
    "canvas_size",
    "canvas_size_for",
    "to_physical",
    "snap_to_grid",
    "page_orientation",
    # ids
    "new_id",
    "generate_upload_filename",
    "safe_export_name",
    # serialize
    "serialize_template",
    "deserialize_template",
    "load_template_file",
    "create_new_template",
    "create_new_variable",
    "atomic_write_json",
]
