import pytest

from docbatch.errors import InvalidColorError
from docbatch.geometry import (
    Rect,
    fraction_to_native,
    hex_to_rgb01,
    native_to_screen,
    screen_to_native,
)


def test_hex_to_rgb01_extremes():
    assert hex_to_rgb01("#000000") == (0.0, 0.0, 0.0)
    assert hex_to_rgb01("#FFFFFF") == (1.0, 1.0, 1.0)


@pytest.mark.parametrize("color", ["#1F4FB2", "#abcdef", "#7f0080", "#010203"])
def test_hex_to_rgb01_unit_range(color):
    rgb = hex_to_rgb01(color)
    assert len(rgb) == 3
    assert all(0.0 <= c <= 1.0 for c in rgb)


def test_hex_to_rgb01_values():
    r, g, b = hex_to_rgb01("#ff8000")
    assert r == 1.0
    assert g == pytest.approx(128 / 255)
    assert b == 0.0


@pytest.mark.parametrize("bad", ["", "#FFF", "FFFFFF", "#GGGGGG", "#12345", "#1234567", None, 0xFFFFFF])
def test_hex_to_rgb01_rejects_malformed(bad):
    with pytest.raises(InvalidColorError):
        hex_to_rgb01(bad)


def test_screen_to_native_scales_per_axis():
    r = screen_to_native(Rect(10, 20, 30, 40), container_size=(400, 500), native_size=(800, 1500))
    assert r == Rect(20, 60, 60, 120)


def test_native_to_screen_inverts_screen_to_native():
    native = Rect(100, 200, 200, 50)
    screen = native_to_screen(native, native_size=(800, 1000), container_size=(600, 750))
    assert screen == Rect(75, 150, 150, 37.5)
    back = screen_to_native(screen, container_size=(600, 750), native_size=(800, 1000))
    assert back.x == pytest.approx(native.x)
    assert back.y == pytest.approx(native.y)
    assert back.w == pytest.approx(native.w)
    assert back.h == pytest.approx(native.h)


def test_native_to_screen_follows_container_resize():
    native = Rect(100, 100, 100, 100)
    small = native_to_screen(native, (1000, 1000), (500, 500))
    large = native_to_screen(native, (1000, 1000), (2000, 2000))
    assert small == Rect(50, 50, 50, 50)
    assert large == Rect(200, 200, 200, 200)


def test_zero_sized_container_rejected():
    with pytest.raises(ValueError):
        screen_to_native(Rect(1, 1, 1, 1), (0, 100), (100, 100))


def test_fraction_to_native():
    assert fraction_to_native(0.25, 0.5, 0.5, 0.1, (800, 1000)) == Rect(200, 500, 400, 100)


def test_rect_as_fitz_rect():
    r = Rect(10, 20, 30, 40).as_rect()
    assert (r.x0, r.y0, r.x1, r.y1) == (10, 20, 40, 60)
