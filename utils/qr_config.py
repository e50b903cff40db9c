"""
utils/qr_config.py
────────────────────────────────────────────
Globale Konfiguration für den vCard-QR-Dienst.

- Encoder-Optionen (Fehlerkorrektur, Rand, Skalierung)
- Session- und Logging-Einstellungen aus der Umgebung (.env)
────────────────────────────────────────────
"""

import os
from typing import Dict, Any

# ─────────────────────────────────────────────
# 🎨 ENCODER-OPTIONEN (fest)
# ─────────────────────────────────────────────
QR_ENCODER_OPTIONS: Dict[str, Any] = {
    "error_correction": "M",
    "margin": 1,
    "scale": 6,
}

QR_COLORS: Dict[str, str] = {
    "fg": "#000000",
    "bg": "#FFFFFF",
}


def get_encoder_options() -> Dict[str, Any]:
    """Kopie der Encoder-Optionen, damit niemand die Konstanten verändert."""
    return dict(QR_ENCODER_OPTIONS)


# ─────────────────────────────────────────────
# 🔐 SESSION & LOGGING
# ─────────────────────────────────────────────
def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def get_session_settings() -> Dict[str, Any]:
    return {
        "secret_key": os.getenv("SESSION_SECRET", "vcard-qr-secret-key"),
        "session_cookie": os.getenv("SESSION_COOKIE_NAME", "vcard_qr_session"),
        "same_site": os.getenv("SESSION_SAME_SITE", "lax"),
        "https_only": _env_flag("SESSION_HTTPS_ONLY"),
        "max_age": 60 * 60 * 24,
    }


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_session_store_limits() -> Dict[str, int]:
    """Serverseitige Sitzungen: Lebensdauer wie das Cookie, plus Obergrenze."""
    return {
        "ttl_seconds": get_session_settings()["max_age"],
        "max_sessions": int(os.getenv("SESSION_MAX_ACTIVE", "1000")),
    }
