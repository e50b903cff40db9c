# utils/export_name.py
"""Dateinamen für heruntergeladene vCard-QR-Codes."""

from __future__ import annotations

import re

DEFAULT_BASE_NAME = "contact"
EXPORT_SUFFIX = "-vcard-qr.png"

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify_name(first_name: str, last_name: str) -> str:
    combined = f"{first_name or ''} {last_name or ''}".strip().lower()
    return _NON_SLUG_RE.sub("-", combined).strip("-")


def export_filename(first_name: str, last_name: str) -> str:
    """z. B. ("Max", "Mustermann") → "max-mustermann-vcard-qr.png"."""
    return f"{slugify_name(first_name, last_name) or DEFAULT_BASE_NAME}{EXPORT_SUFFIX}"
