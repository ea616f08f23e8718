"""
test_coordinates.py - 좌표/단위 변환 테스트

DoD:
- canvas_size 결정론적, 모든 키에 대해 같은 입력 → 같은 출력
- mm / in 공식, 알 수 없는 단위 → 794 x 1123
- 알 수 없는 키 → a4
- to_physical: 캔버스 중앙 → 페이지 중앙
- snap: (137, 253) → (125, 250)
"""

import pytest

from src.core.coordinates import (
    CanvasSize,
    canvas_size,
    canvas_size_for,
    page_orientation,
    snap_to_grid,
    to_physical,
)
from src.domain.constants import PAGE_SIZES, get_page_size
from src.domain.schemas import PageSize

# =============================================================================
# canvas_size 테스트
# =============================================================================


class TestCanvasSize:
    """canvas_size 함수 테스트."""

    def test_a4(self):
        """a4: 210mm * 2.83."""
        size = canvas_size("a4")

        assert size.width == pytest.approx(594.3)
        assert size.height == pytest.approx(840.51)

    def test_letter(self):
        """letter: in * 72 * 2.83 / 25.4."""
        size = canvas_size("letter")

        assert size.width == pytest.approx(8.5 * 72 * 2.83 / 25.4)
        assert size.height == pytest.approx(11 * 72 * 2.83 / 25.4)

    def test_legal_taller_than_letter(self):
        """legal 은 letter 와 너비 같고 더 김."""
        letter = canvas_size("letter")
        legal = canvas_size("legal")

        assert legal.width == pytest.approx(letter.width)
        assert legal.height > letter.height

    @pytest.mark.parametrize("key", list(PAGE_SIZES) + ["unknown", "", None])
    def test_deterministic(self, key):
        """같은 키 → 같은 결과."""
        assert canvas_size(key) == canvas_size(key)

    def test_unknown_key_resolves_to_a4(self):
        """알 수 없는 키 → a4 크기."""
        assert canvas_size("tabloid") == canvas_size("a4")

    def test_unknown_unit_fallback(self):
        """mm / in 이 아닌 단위 → 794 x 1123."""
        page = PageSize(key="custom", label="Custom", width=100, height=100, unit="pt")

        assert canvas_size_for(page) == CanvasSize(width=794, height=1123)

    def test_custom_table(self):
        """주입한 테이블 사용."""
        table = {"card": PageSize(key="card", label="Card", width=100, height=50, unit="mm")}

        size = canvas_size("card", table)

        assert size.width == pytest.approx(283.0)
        assert size.height == pytest.approx(141.5)


# =============================================================================
# to_physical 테스트
# =============================================================================


class TestToPhysical:
    """to_physical 함수 테스트."""

    @pytest.mark.parametrize("key", list(PAGE_SIZES))
    def test_center_maps_to_page_center(self, key):
        """캔버스 중앙 → 페이지 중앙."""
        page = get_page_size(key)
        canvas = canvas_size_for(page)

        point = to_physical(canvas.width / 2, canvas.height / 2, canvas, page)

        assert point.x == pytest.approx(page.width / 2)
        assert point.y == pytest.approx(page.height / 2)

    def test_origin(self):
        """(0, 0) → (0, 0)."""
        page = get_page_size("letter")

        assert to_physical(0, 0, canvas_size_for(page), page) == (0, 0)

    def test_a4_mm(self):
        """a4: px / 2.83 = mm."""
        page = get_page_size("a4")

        point = to_physical(283, 566, canvas_size_for(page), page)

        assert point.x == pytest.approx(100)
        assert point.y == pytest.approx(200)


# =============================================================================
# snap_to_grid 테스트
# =============================================================================


class TestSnapToGrid:
    """snap_to_grid 함수 테스트."""

    def test_example(self):
        """(137, 253) → (125, 250)."""
        assert (snap_to_grid(137), snap_to_grid(253)) == (125, 250)

    def test_half_rounds_up(self):
        """12.5 → 25 (은행가 반올림 아님)."""
        assert snap_to_grid(12.5) == 25
        assert snap_to_grid(37.5) == 50

    def test_custom_grid(self):
        """grid 10."""
        assert snap_to_grid(14, 10) == 10
        assert snap_to_grid(15, 10) == 20

    def test_zero_grid_is_noop(self):
        """grid 0 → 그대로."""
        assert snap_to_grid(13.3, 0) == 13.3


# =============================================================================
# page_orientation 테스트
# =============================================================================


class TestPageOrientation:
    """page_orientation 함수 테스트."""

    @pytest.mark.parametrize("key", list(PAGE_SIZES))
    def test_builtin_sizes_are_portrait(self, key):
        """기본 크기는 모두 세로."""
        assert page_orientation(get_page_size(key)) == "portrait"

    def test_landscape(self):
        """가로가 길면 landscape."""
        page = PageSize(key="wide", label="Wide", width=297, height=210, unit="mm")

        assert page_orientation(page) == "landscape"
