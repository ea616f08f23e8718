"""
배경 이미지 소스 로더.

backgroundImage 는 불투명 문자열이며 다음 중 하나:
- data URL (data:image/png;base64,....): 클라이언트에서 만든 것
- 업로드 URL (/api/uploads/<name>): 서버 업로드 엔드포인트가 돌려준 것
- 파일 경로 (allow_paths=True 인 로더만)
"""

import base64
import binascii
import urllib.parse
from collections.abc import Callable
from pathlib import Path

from src.domain.constants import UPLOAD_URL_PREFIX
from src.domain.errors import EditorError, ErrorCodes

ImageLoader = Callable[[str], bytes]


def decode_data_url(source: str) -> bytes:
    """
    data URL → 바이트.

    Raises:
        EditorError: IMAGE_DECODE_FAILED
    """
    header, sep, payload = source.partition(",")
    if not sep or not header.startswith("data:"):
        raise EditorError(
            ErrorCodes.IMAGE_DECODE_FAILED,
            message="Malformed data URL",
        )

    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EditorError(
                ErrorCodes.IMAGE_DECODE_FAILED,
                message="Invalid base64 image data",
                error=str(e),
            ) from e
    return urllib.parse.unquote_to_bytes(payload)


def encode_data_url(data: bytes, media_type: str) -> str:
    """바이트 → base64 data URL."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


def resolve_upload_path(uploads_dir: Path, source: str) -> Path:
    """
    /api/uploads/<name> → uploads_dir/<name>.

    경로 순회 방지: 결과가 uploads_dir 내부가 아니면 에러.
    """
    name = urllib.parse.unquote(source[len(UPLOAD_URL_PREFIX):])
    candidate = uploads_dir / name
    try:
        candidate.resolve().relative_to(uploads_dir.resolve())
    except ValueError as e:
        raise EditorError(
            ErrorCodes.IMAGE_SOURCE_REJECTED,
            message="Invalid upload path",
            source=source,
        ) from e
    return candidate


def make_image_loader(uploads_dir: Path | None = None, allow_paths: bool = False) -> ImageLoader:
    """
    backgroundImage 문자열 → 이미지 바이트 로더 생성.

    Args:
        uploads_dir: 업로드 URL 을 해석할 디렉터리 (없으면 업로드 URL 불가)
        allow_paths: 파일 경로 허용 여부 (CLI / 로컬 세션만 True, 서버는 False)
    """

    def load(source: str) -> bytes:
        if source.startswith("data:"):
            return decode_data_url(source)

        if source.startswith(UPLOAD_URL_PREFIX):
            if uploads_dir is None:
                raise EditorError(
                    ErrorCodes.IMAGE_SOURCE_REJECTED,
                    message="Upload URLs cannot be resolved here",
                    source=source,
                )
            path = resolve_upload_path(uploads_dir, source)
        elif allow_paths:
            path = Path(source)
        else:
            raise EditorError(
                ErrorCodes.IMAGE_SOURCE_REJECTED,
                message="Background image must be a data URL or an uploaded image",
            )

        try:
            return path.read_bytes()
        except OSError as e:
            raise EditorError(
                ErrorCodes.IMAGE_DECODE_FAILED,
                message="Background image could not be read",
                source=source[:100],
                error=str(e),
            ) from e

    return load
