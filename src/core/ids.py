"""
ID 생성: template_id, variable_id, 업로드 파일명

규칙:
- Template / Variable ID 는 UUID v4 문자열
- 업로드 파일명: {field}-{timestamp_ms}-{random}{ext}
"""

import secrets
import time
import uuid


def new_id() -> str:
    """
    Template / Variable ID 생성.

    고유성 보장: UUID v4

    Returns:
        uuid 문자열 (예: "3f1c...-...")
    """
    return str(uuid.uuid4())


def generate_upload_filename(extension: str, field_name: str = "image") -> str:
    """
    업로드 파일 저장용 이름 생성.

    포맷: {field}-{timestamp_ms}-{random}{ext}
    충돌 방지를 위해 밀리초 타임스탬프 + 난수 조합.

    Args:
        extension: 확장자 (".png" 형태, 소문자로 정규화)
        field_name: 업로드 필드명

    Returns:
        파일명 문자열
    """
    ext = extension.lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"

    timestamp = int(time.time() * 1000)
    unique = secrets.randbelow(10**9)

    return f"{field_name}-{timestamp}-{unique}{ext}"


def safe_export_name(name: str) -> str:
    """
    내보내기 파일명을 디스크 저장용으로 정리.

    - 경로 구분자/제어문자 → 밑줄
    - 앞뒤 공백, 점 제거
    """
    sanitized = "".join(
        "_" if c in '/\\:*?"<>|' or ord(c) < 32 else c
        for c in name
    )
    sanitized = sanitized.strip().strip(".")
    return sanitized or "document"
