"""
Error definitions for the editor.

규칙:
- 조용한 실패 금지 → EditorError로 명시적 실패
- 검증 실패는 모델 변경 전에 발생 (fail closed)
- I/O, 인코딩 실패는 경계(session, routes, CLI)에서 잡아서 로그 + 알림
"""

from typing import Any


class EditorError(Exception):
    """
    에디터/내보내기/저장소 공통 에러.

    하나의 사용자 액션 범위에서만 실패를 표현한다. 프로세스를 종료시키는
    에러는 없음.

    Usage:
        raise EditorError("VALIDATION_FAILED", field="title", message="...")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    @property
    def message(self) -> str:
        """사용자에게 보여줄 메시지 (context에 message가 없으면 코드)."""
        return str(self.context.get("message", self.code))

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **{k: v if isinstance(v, (str, int, float, bool)) or v is None else str(v)
               for k, v in self.context.items()},
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Validation (fail closed) ===
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_TEMPLATE = "INVALID_TEMPLATE"
    DUPLICATE_VARIABLE_ID = "DUPLICATE_VARIABLE_ID"

    # === Editor ===
    VARIABLE_NOT_FOUND = "VARIABLE_NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"

    # === Storage ===
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    STORAGE_FAILED = "STORAGE_FAILED"
    STORAGE_LOCK_TIMEOUT = "STORAGE_LOCK_TIMEOUT"

    # === Render / Export ===
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    RENDER_FAILED = "RENDER_FAILED"
    IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
    IMAGE_SOURCE_REJECTED = "IMAGE_SOURCE_REJECTED"

    # === Import / Upload ===
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    IMPORT_FAILED = "IMPORT_FAILED"
    UPLOAD_REJECTED = "UPLOAD_REJECTED"
