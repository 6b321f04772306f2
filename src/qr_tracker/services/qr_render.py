"""QR code image rendering: text in, PNG data URI out."""

import base64
import io
from dataclasses import dataclass

import qrcode
from PIL import Image

from ..core.exceptions import RenderError
from ..utils.logging_config import log_exception

PNG_DATA_URI_PREFIX = "data:image/png;base64,"

# Returned in place of an image when rendering fails
EMPTY_IMAGE = ""


@dataclass(frozen=True)
class QROptions:
    """Rendering options."""

    size_px: int = 300
    margin_modules: int = 2
    dark_color: str = "#000000"
    light_color: str = "#FFFFFF"


def render_qr_png(text: str, options: QROptions = QROptions()) -> bytes:
    """Render ``text`` as a square PNG of ``options.size_px`` pixels.

    Raises:
        RenderError: If the text is empty, too long for a QR code, or the options are invalid
    """
    if not text:
        raise RenderError("Cannot render an empty QR payload")
    if options.size_px <= 0 or options.margin_modules < 0:
        raise RenderError(f"Invalid QR options: {options}")

    try:
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            border=options.margin_modules,
        )
        qr.add_data(text)
        qr.make(fit=True)

        # Largest whole-pixel module size that fits, then scale to the exact size
        total_modules = qr.modules_count + 2 * options.margin_modules
        qr.box_size = max(1, options.size_px // total_modules)

        image = qr.make_image(
            fill_color=options.dark_color, back_color=options.light_color
        ).convert("RGB")
        if image.size != (options.size_px, options.size_px):
            image = image.resize((options.size_px, options.size_px), Image.NEAREST)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except Exception as e:
        raise RenderError(f"Failed to render QR code: {e}") from e

    return buffer.getvalue()


def render_qr_data_uri(text: str, options: QROptions = QROptions()) -> str:
    """Render ``text`` as a ``data:image/png;base64,...`` URI."""
    png = render_qr_png(text, options)
    return PNG_DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")


def safe_render(text: str, options: QROptions = QROptions()) -> str:
    """Like render_qr_data_uri, but logs failures and returns EMPTY_IMAGE."""
    try:
        return render_qr_data_uri(text, options)
    except RenderError as e:
        log_exception('render', e, {"text": text})
        return EMPTY_IMAGE
