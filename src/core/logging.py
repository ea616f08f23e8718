"""
로깅 설정.

- 모듈별 logger = logging.getLogger(__name__)
- 프로세스 시작 시 configure_logging(config) 한 번 호출
- 포맷: "%(asctime)s [%(levelname)s] %(message)s"
"""

import logging
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: dict[str, Any] | None = None) -> None:
    """
    설정 dict 의 logging 섹션으로 루트 로거 구성.

    Args:
        config: 전체 설정 (default.yaml). logging.level / format / datefmt 사용.
    """
    section = (config or {}).get("logging") or {}

    level_name = str(section.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format=section.get("format", DEFAULT_LOG_FORMAT),
        datefmt=section.get("datefmt", DEFAULT_LOG_DATEFMT),
    )
    logging.getLogger("src").setLevel(level)
