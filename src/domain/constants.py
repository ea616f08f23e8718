"""
Domain Constants: 에디터 전역 상수.

페이지 크기 테이블, 캔버스 변환 상수, 저장소 키 등
시스템 전반에서 사용되는 값들.
"""

import os

from src.domain.schemas import DEFAULT_PAGE_SIZE, PageSize

# =============================================================================
# Page Sizes (페이지 크기 테이블)
# =============================================================================
# 기본 3종. 추가는 register_page_size() 로.

PAGE_SIZES: dict[str, PageSize] = {
    "a4": PageSize(key="a4", label="A4 (210 × 297 mm)", width=210, height=297, unit="mm"),
    "letter": PageSize(key="letter", label="Letter (8.5 × 11 in)", width=8.5, height=11, unit="in"),
    "legal": PageSize(key="legal", label="Legal (8.5 × 14 in)", width=8.5, height=14, unit="in"),
}


def get_page_size(key: str | None, page_sizes: dict[str, PageSize] | None = None) -> PageSize:
    """
    키로 PageSize 조회. 알 수 없는 키는 a4 로 대체 (에러 아님).

    Args:
        key: 페이지 크기 키 (예: "letter")
        page_sizes: 조회할 테이블 (기본 PAGE_SIZES)

    Returns:
        PageSize
    """
    table = PAGE_SIZES if page_sizes is None else page_sizes
    if key and key in table:
        return table[key]
    return table.get(DEFAULT_PAGE_SIZE, PAGE_SIZES[DEFAULT_PAGE_SIZE])


def register_page_size(page_size: PageSize) -> None:
    """페이지 크기 추가 (같은 키는 덮어씀)."""
    PAGE_SIZES[page_size.key] = page_size


# =============================================================================
# Canvas (캔버스 픽셀 변환)
# =============================================================================
# 2.83 과 인치 공식(72 * 2.83 / 25.4)은 내보내기 결과가 이 값에 맞춰져 있어
# 그대로 유지한다.

SCALE_FACTOR = 2.83
POINTS_PER_INCH = 72
MM_PER_INCH = 25.4

# 알 수 없는 단위일 때의 고정 캔버스 크기 (px)
FALLBACK_CANVAS_WIDTH = 794
FALLBACK_CANVAS_HEIGHT = 1123

# 스냅 그리드 간격 (px)
GRID_SIZE = 25

# 새 Variable 기본 위치 (사이드바 "추가" 버튼)
DEFAULT_VARIABLE_POSITION = (100, 100)

# =============================================================================
# Local Storage Keys (클라이언트 저장소 키)
# =============================================================================

STORAGE_KEY = "template-editor-templates"
CURRENT_TEMPLATE_KEY = "template-editor-current-template"

# 서버 저장소 기본 소유자 (인증 없음)
DEFAULT_OWNER_ID = "template-user"

# =============================================================================
# Export / Upload
# =============================================================================

EXPORT_FORMATS = ("pdf", "docx", "json")
DEFAULT_EXPORT_BASENAME = "document"

UPLOAD_URL_PREFIX = "/api/uploads/"
UPLOAD_FIELD_NAME = "image"
UPLOAD_MAX_SIZE_MB = 5
UPLOAD_ALLOWED_EXTENSIONS = (".jpeg", ".jpg", ".png", ".gif")

# =============================================================================
# MIME Types
# =============================================================================

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

MIME_TYPES = {
    ".docx": DOCX_MIME,
    ".doc": "application/msword",
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".json": "application/json",
}


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, "application/octet-stream")
