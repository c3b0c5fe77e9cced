"""Tests for icon_gen.py images."""

from datetime import date

from icon_gen import create_icon_image, create_trash_image


def test_tray_icon_marks_weekday():
    img = create_icon_image(date(2026, 10, 14))  # Wednesday
    assert img.size == (64, 64)
    assert img.mode == "RGBA"
    cell = 64 // 7
    wed = img.getpixel((2 * cell + cell // 2, 7))
    mon = img.getpixel((cell // 2, 7))
    assert wed[:3] == (0x00, 0x78, 0xD4)
    assert mon[:3] == (0xD0, 0xD0, 0xD0)


def test_trash_image_is_transparent_outside_bin():
    img = create_trash_image(48)
    assert img.size == (48, 48)
    assert img.getpixel((0, 0))[3] == 0
    assert img.getpixel((24, 22))[3] == 255
