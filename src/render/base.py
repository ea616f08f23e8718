"""
Render 공통: 내보내기 결과물, 파일명, 색상 정규화.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from src.core.ids import safe_export_name
from src.domain.constants import DEFAULT_EXPORT_BASENAME, get_mime_type
from src.domain.schemas import Template

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^[0-9a-fA-F]{6}$")
_SHORT_HEX_COLOR = re.compile(r"^[0-9a-fA-F]{3}$")


@dataclass
class ExportArtifact:
    """내보내기 결과 (파일명 + 바이트)."""
    filename: str
    media_type: str
    content: bytes

    def save(self, directory: Path) -> Path:
        """
        directory 에 저장.

        파일명의 경로 구분자 등은 밑줄로 바꿔 directory 밖으로 나가지 않게 한다.

        Returns:
            저장된 파일 경로
        """
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / safe_export_name(self.filename)
        path.write_bytes(self.content)
        return path


def export_filename(template: Template, extension: str) -> str:
    """`{title or 'document'}.{ext}`"""
    base = template.title or DEFAULT_EXPORT_BASENAME
    return f"{base}.{extension.lstrip('.')}"


def make_artifact(template: Template, extension: str, content: bytes) -> ExportArtifact:
    filename = export_filename(template, extension)
    return ExportArtifact(
        filename=filename,
        media_type=get_mime_type(f"x.{extension.lstrip('.')}"),
        content=content,
    )


def normalize_hex_color(value: str | None) -> str | None:
    """
    "#RRGGBB" / "RRGGBB" / "#RGB" → "RRGGBB" (대문자).

    해석할 수 없으면 None (호출자가 기본색 사용).
    """
    if not value:
        return None
    raw = value.strip().lstrip("#")
    if _SHORT_HEX_COLOR.match(raw):
        raw = "".join(c * 2 for c in raw)
    if not _HEX_COLOR.match(raw):
        logger.warning(f"Unrecognized color {value!r}, falling back to default")
        return None
    return raw.upper()
