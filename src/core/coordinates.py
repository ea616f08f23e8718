"""
좌표/단위 변환: 페이지 크기 → 캔버스 픽셀, 캔버스 픽셀 → 물리 단위.

규칙:
- canvas_size 는 순수 함수, 결정론적, 예외 없음
- 알 수 없는 pageSize 키 → a4 로 대체 후 변환
- mm: px = mm * 2.83 / in: px = in * 72 * 2.83 / 25.4 / 그 외 단위: 794 x 1123
- to_physical 은 비율 보존 (캔버스 중앙 → 페이지 중앙)
"""

import math
from dataclasses import dataclass
from typing import NamedTuple

from src.domain.constants import (
    FALLBACK_CANVAS_HEIGHT,
    FALLBACK_CANVAS_WIDTH,
    GRID_SIZE,
    MM_PER_INCH,
    POINTS_PER_INCH,
    SCALE_FACTOR,
    get_page_size,
)
from src.domain.schemas import PageSize


@dataclass(frozen=True)
class CanvasSize:
    """캔버스 픽셀 크기."""
    width: float
    height: float

    def to_dict(self) -> dict[str, float]:
        return {"width": self.width, "height": self.height}


class PhysicalPoint(NamedTuple):
    """물리 단위 좌표 (PageSize.unit 기준)."""
    x: float
    y: float


def canvas_size_for(page: PageSize) -> CanvasSize:
    """PageSize 하나를 캔버스 픽셀 크기로 변환."""
    if page.unit == "mm":
        return CanvasSize(
            width=page.width * SCALE_FACTOR,
            height=page.height * SCALE_FACTOR,
        )
    if page.unit == "in":
        return CanvasSize(
            width=page.width * POINTS_PER_INCH * SCALE_FACTOR / MM_PER_INCH,
            height=page.height * POINTS_PER_INCH * SCALE_FACTOR / MM_PER_INCH,
        )
    return CanvasSize(width=FALLBACK_CANVAS_WIDTH, height=FALLBACK_CANVAS_HEIGHT)


def canvas_size(page_size_key: str | None, page_sizes: dict[str, PageSize] | None = None) -> CanvasSize:
    """
    pageSize 키 → 캔버스 픽셀 크기.

    Args:
        page_size_key: 페이지 크기 키 (알 수 없으면 a4)
        page_sizes: 조회할 테이블 (기본 PAGE_SIZES)

    Returns:
        CanvasSize
    """
    return canvas_size_for(get_page_size(page_size_key, page_sizes))


def to_physical(
    x: float,
    y: float,
    canvas: CanvasSize,
    page: PageSize,
) -> PhysicalPoint:
    """
    캔버스 픽셀 좌표 → 물리 단위 좌표 (내보내기 전용).

    x_phys = (x / canvas.width) * page.width, y 도 동일.

    Args:
        x: 캔버스 x (px)
        y: 캔버스 y (px)
        canvas: 해당 페이지의 캔버스 크기
        page: 물리 페이지 크기

    Returns:
        PhysicalPoint (page.unit 기준)
    """
    return PhysicalPoint(
        x=(x / canvas.width) * page.width,
        y=(y / canvas.height) * page.height,
    )


def snap_to_grid(value: float, grid_size: int = GRID_SIZE) -> int | float:
    """
    가장 가까운 grid_size 배수로 반올림.

    .5 는 올림 (12.5 → 25). round() 의 은행가 반올림과 다름.
    """
    if grid_size <= 0:
        return value
    return math.floor(value / grid_size + 0.5) * grid_size


def page_orientation(page: PageSize) -> str:
    """가로가 더 길면 landscape, 아니면 portrait."""
    return "landscape" if page.width > page.height else "portrait"
