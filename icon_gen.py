"""Generate the tray icon and the trash drop target (PIL Images, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

from calendar_logic import iso_week

_FONT_CANDIDATES = ("segoeuib.ttf", "DejaVuSans-Bold.ttf", "Arial Bold.ttf")


def _truetype(size: int):
    for name in _FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return None


def create_icon_image(today: date | None = None) -> Image.Image:
    """Return a 64×64 RGBA image: a week-grid strip above the ISO week number."""
    size = 64
    img = Image.new("RGBA", (size, size), "white")
    draw = ImageDraw.Draw(img)

    today = today or date.today()
    label = str(iso_week(today))

    # Seven day cells across the top, today's weekday filled
    cell = size // 7
    for i in range(7):
        x0 = i * cell + 1
        fill = "#0078D4" if i == today.weekday() else "#D0D0D0"
        draw.rectangle((x0, 2, x0 + cell - 2, 12), fill=fill)

    # Largest font size that fits below the strip
    avail_h = size - 16
    font_size = 60
    font = None
    while font_size > 10:
        font = _truetype(font_size)
        if font is None:
            font = ImageFont.load_default()
            break
        bbox = draw.textbbox((0, 0), label, font=font)
        if bbox[2] - bbox[0] <= size and bbox[3] - bbox[1] <= avail_h:
            break
        font_size -= 1

    bbox = draw.textbbox((0, 0), label, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = 16 + (avail_h - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), label, fill="black", font=font)

    return img


def create_trash_image(size: int = 48, color: str = "#555555") -> Image.Image:
    """Return a ``size``×``size`` RGBA trash bin on a transparent background."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    w = max(2, size // 16)

    # Lid and handle
    draw.rectangle((size * 0.15, size * 0.18, size * 0.85, size * 0.26), fill=color)
    draw.rectangle((size * 0.40, size * 0.10, size * 0.60, size * 0.18), outline=color, width=w)

    # Body with three ribs
    body = (size * 0.22, size * 0.30, size * 0.78, size * 0.92)
    draw.rectangle(body, outline=color, width=w)
    for frac in (0.37, 0.50, 0.63):
        x = size * frac
        draw.line((x, size * 0.38, x, size * 0.84), fill=color, width=w)

    return img
