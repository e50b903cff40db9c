# =============================================================================
# 🧠 QR-Code Generator – vCard QR
# -----------------------------------------------------------------------------
# Wandelt Text in ein PNG (als Data-URI). Die eigentliche Kodierung
# übernimmt die qrcode-Bibliothek, das Bild rendert Pillow.
# =============================================================================

from __future__ import annotations
from typing import Tuple
from io import BytesIO
import base64
import binascii
import logging
import qrcode
from qrcode.constants import ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q, ERROR_CORRECT_H
from qrcode.image.pil import PilImage

from utils.qr_config import QR_COLORS, QR_ENCODER_OPTIONS

logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

PNG_MEDIA_TYPE = "image/png"


# ---------------------------------------------------------------------------
# 🧩 Hauptfunktion: generate_qr_png
# ---------------------------------------------------------------------------
def generate_qr_png(
    payload: str,
    error_correction: str = QR_ENCODER_OPTIONS["error_correction"],
    margin: int = QR_ENCODER_OPTIONS["margin"],
    scale: int = QR_ENCODER_OPTIONS["scale"],
    fg: str = QR_COLORS["fg"],
    bg: str = QR_COLORS["bg"],
) -> bytes:
    """
    Generiert einen QR-Code als PNG-Bytes.
    `margin` ist der Ruhebereich in Modulen, `scale` die Pixel pro Modul.
    """
    level = ERROR_CORRECTION_LEVELS.get(str(error_correction).upper())
    if level is None:
        raise ValueError(f"Unbekannte Fehlerkorrektur: {error_correction!r}")

    # === 1️⃣ QR-Code Basis ===
    qr = qrcode.QRCode(
        version=None,
        error_correction=level,
        box_size=scale,
        border=margin,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    # === 2️⃣ Bild erzeugen ===
    img = qr.make_image(image_factory=PilImage, fill_color=fg, back_color=bg)

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_data_uri(payload: str, **options) -> str:
    """Wie generate_qr_png, aber als data:image/png;base64,… für die Vorschau."""
    png_bytes = generate_qr_png(payload, **options)
    encoded = base64.b64encode(png_bytes).decode("utf-8")
    logger.info(f"✅ QR-Code erzeugt ({len(payload)} Zeichen, {len(png_bytes)} Bytes)")
    return f"data:{PNG_MEDIA_TYPE};base64,{encoded}"


def decode_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """Zerlegt eine Base64-Data-URI in (Media-Type, Bytes)."""
    if not data_uri or not data_uri.startswith("data:") or "," not in data_uri:
        raise ValueError("Keine gültige Data-URI")
    header, body = data_uri[len("data:"):].split(",", 1)
    media_type, _, encoding = header.partition(";")
    if encoding != "base64":
        raise ValueError("Nur Base64-Data-URIs werden unterstützt")
    try:
        return media_type or "application/octet-stream", base64.b64decode(body, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Ungültige Base64-Daten: {e}") from e
