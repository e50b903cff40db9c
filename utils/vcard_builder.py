# utils/vcard_builder.py
# =============================================================================
# 🪪 vCard 3.0 Text für QR-Codes
# -----------------------------------------------------------------------------
# Feste Zeilenreihenfolge, optionale Zeilen entfallen komplett.
# Erwartet einen bereits validierten (getrimmten) ContactRecord.
# =============================================================================

from __future__ import annotations

from typing import List

from utils.vcard_schema import ContactRecord

ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country")


def display_name(record: ContactRecord) -> str:
    return f"{record.first_name} {record.last_name}".strip() or record.first_name or record.last_name


def has_address(record: ContactRecord) -> bool:
    return any(getattr(record, name).strip() for name in ADDRESS_FIELDS)


def build_address(record: ContactRecord) -> str:
    # Postfach und Adresszusatz bleiben immer leer
    segments = ["", ""] + [getattr(record, name).strip() for name in ADDRESS_FIELDS]
    return ";".join(segments)


def build_vcard(record: ContactRecord) -> str:
    """Erzeugt den vCard-Text (Zeilen mit \\n getrennt, ohne abschließenden Umbruch)."""
    lines: List[str] = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"N:{record.last_name};{record.first_name}",
        f"FN:{display_name(record)}",
    ]

    if record.job_title:
        lines.append(f"TITLE:{record.job_title}")
    if record.company:
        lines.append(f"ORG:{record.company}")
    if record.email:
        lines.append(f"EMAIL;TYPE=INTERNET:{record.email}")
    if record.phone:
        lines.append(f"TEL;TYPE=CELL:{record.phone}")
    if record.website:
        lines.append(f"URL:{record.website}")

    if has_address(record):
        lines.append(f"ADR;TYPE=WORK:{build_address(record)}")

    lines.append("END:VCARD")
    return "\n".join(lines)
