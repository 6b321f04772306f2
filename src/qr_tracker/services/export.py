"""Export sinks for rendered QR codes: file download and printable label."""

import base64
import binascii
import html
import re
from urllib.parse import quote

from ..core.exceptions import RenderError
from ..domain.models import TrackedObject
from .qr_render import PNG_DATA_URI_PREFIX

_WHITESPACE = re.compile(r"\s+")
_NON_ASCII = re.compile(r"[^\x20-\x7e]")

PRINT_INSTRUCTIONS = (
    "Scan this QR code daily to record the object's location."
    "<br>Use the QR Tracker app to scan it."
)

PRINT_TEMPLATE = """<html>
  <head>
    <title>QR Code - {name}</title>
    <style>
      body {{
        font-family: Arial, sans-serif;
        text-align: center;
        padding: 20px;
        margin: 0;
      }}
      .qr-container {{
        max-width: 400px;
        margin: 0 auto;
        border: 2px solid #000;
        padding: 20px;
        border-radius: 10px;
      }}
      .qr-title {{ font-size: 24px; font-weight: bold; margin-bottom: 10px; }}
      .qr-code {{ font-size: 14px; color: #666; margin-bottom: 20px; }}
      .qr-image {{ max-width: 100%; height: auto; }}
      .instructions {{ font-size: 12px; color: #888; margin-top: 15px; line-height: 1.4; }}
      @media print {{
        body {{ margin: 0; }}
        .qr-container {{ border: 2px solid #000; }}
      }}
    </style>
  </head>
  <body onload="window.print()">
    <div class="qr-container">
      <div class="qr-title">{name}</div>
      <div class="qr-code">Code: {token}</div>
      <img src="{image}" alt="QR Code" class="qr-image" />
      <div class="instructions">{instructions}</div>
    </div>
  </body>
</html>
"""


def download_filename(name: str) -> str:
    """File name for a downloaded QR image, e.g. ``QR_Notebook_Dell.png``."""
    return f"QR_{_WHITESPACE.sub('_', name.strip())}.png"


def content_disposition(filename: str) -> str:
    """``Content-Disposition`` value for downloading ``filename`` (RFC 6266).

    Header values must be Latin-1, so ``filename`` carries an ASCII fallback
    and ``filename*`` carries the exact UTF-8 name when the two differ.
    """
    fallback = _NON_ASCII.sub("_", filename).replace("\\", "\\\\").replace('"', '\\"')
    value = f'attachment; filename="{fallback}"'
    if fallback != filename:
        value += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return value


def data_uri_to_bytes(data_uri: str) -> bytes:
    """Decode a PNG data URI back into raw bytes.

    Raises:
        RenderError: If the URI is empty or not a base64 PNG data URI
    """
    if not data_uri or not data_uri.startswith(PNG_DATA_URI_PREFIX):
        raise RenderError("Not a PNG data URI")
    try:
        return base64.b64decode(data_uri[len(PNG_DATA_URI_PREFIX):], validate=True)
    except (binascii.Error, ValueError) as e:
        raise RenderError(f"Invalid base64 payload in data URI: {e}") from e


def build_print_document(obj: TrackedObject, data_uri: str) -> str:
    """HTML page showing the object's name, token and QR image, ready to print."""
    return PRINT_TEMPLATE.format(
        name=html.escape(obj.name),
        token=html.escape(obj.identity_token),
        image=html.escape(data_uri, quote=True),
        instructions=PRINT_INSTRUCTIONS,
    )
