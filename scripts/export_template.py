#!/usr/bin/env python3
"""
export_template.py - 템플릿 JSON 파일 → PDF / Word / JSON 내보내기

출력 파일명: {title or 'document'}.{ext}

사용법:
    # PDF (기본)
    python scripts/export_template.py my_template.json

    # 여러 포맷, 출력 디렉터리 지정
    python scripts/export_template.py my_template.json -f pdf -f docx -o out/

    # 업로드 URL 배경 이미지 해석
    python scripts/export_template.py my_template.json --uploads-dir uploads/
"""

import argparse
import logging
import sys
from pathlib import Path

# 프로젝트 루트 (src 임포트용)
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.serialize import load_template_file  # noqa: E402
from src.domain.constants import EXPORT_FORMATS  # noqa: E402
from src.domain.errors import EditorError  # noqa: E402
from src.render.exporter import export_template  # noqa: E402
from src.render.images import make_image_loader  # noqa: E402

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def export_file(
    template_path: Path,
    formats: list[str],
    output_dir: Path,
    uploads_dir: Path | None = None,
) -> list[Path]:
    """
    템플릿 파일 하나를 여러 포맷으로 내보내기.

    Raises:
        EditorError: 템플릿 로드 / 렌더 실패
    """
    template = load_template_file(template_path)
    loader = make_image_loader(uploads_dir, allow_paths=True)

    written = []
    for fmt in formats:
        artifact = export_template(template, fmt, image_loader=loader)
        path = artifact.save(output_dir)
        logger.info(f"{fmt}: {path} ({len(artifact.content)} bytes)")
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="템플릿 JSON → PDF / Word / JSON 내보내기",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "template",
        type=Path,
        help="템플릿 JSON 파일 경로",
    )
    parser.add_argument(
        "-f", "--format",
        dest="formats",
        action="append",
        choices=EXPORT_FORMATS,
        help="출력 포맷 (반복 가능, 기본: pdf)",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=Path("."),
        help="출력 디렉터리 (기본: 현재 디렉터리)",
    )
    parser.add_argument(
        "--uploads-dir",
        type=Path,
        default=None,
        help="/api/uploads/ 배경 이미지를 찾을 디렉터리",
    )

    args = parser.parse_args(argv)
    formats = args.formats or ["pdf"]

    try:
        export_file(args.template, formats, args.output_dir, args.uploads_dir)
    except EditorError as e:
        logger.error(f"Export failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Could not write output: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
