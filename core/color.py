# core/color.py
import io
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .debug import debug_log
from .models import Color


BRIGHTNESS_FLOOR = 0.5


def adjust_brightness(red: float, green: float, blue: float, alpha: float = 1.0) -> Color:
    """
    Lift dark colors so their average channel value reaches the floor.

    Channels are scaled together (capped at 1.0) to keep the hue. A pure
    black input has no hue to keep and becomes neutral gray.
    """
    brightness = (red + green + blue) / 3.0
    if brightness >= BRIGHTNESS_FLOOR:
        return Color(red, green, blue, alpha)

    if brightness <= 0.0:
        return Color(BRIGHTNESS_FLOOR, BRIGHTNESS_FLOOR, BRIGHTNESS_FLOOR, alpha)

    scale = BRIGHTNESS_FLOOR / brightness
    return Color(
        min(red * scale, 1.0),
        min(green * scale, 1.0),
        min(blue * scale, 1.0),
        alpha,
    )


def dominant_color(image: Image.Image) -> Optional[Color]:
    # Box filter averages every source pixel into the single output pixel.
    try:
        pixel = image.convert("RGBA").resize((1, 1), Image.BOX).getpixel((0, 0))
    except Exception as e:
        debug_log(f"Color sampling failed: {e}")
        return None

    r, g, b, a = (channel / 255.0 for channel in pixel)
    return adjust_brightness(r, g, b, a)


def color_from_bytes(data: bytes) -> Optional[Color]:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        debug_log(f"Artwork decode failed: {e}")
        return None
    return dominant_color(image)
