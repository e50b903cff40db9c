# utils/vcard_schema.py
"""
Kontaktdaten (ContactRecord) und Validierungsregeln für vCard-QR-Codes.

Jede Regel ist ein Eintrag in VCARD_RULES: Feldname → (Prüfung, Fehler-Key).
Die Fehler-Keys werden nie übersetzt, das macht die Oberfläche.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import urlsplit


# ─────────────────────────────────────────────
# 🧾 Felder
# ─────────────────────────────────────────────
CONTACT_FIELDS: Tuple[str, ...] = (
    "first_name",
    "last_name",
    "job_title",
    "company",
    "email",
    "phone",
    "website",
    "street",
    "city",
    "state",
    "postal_code",
    "country",
)

# Browser-Clients schicken camelCase
_CAMEL_ALIASES: Dict[str, str] = {
    "firstName": "first_name",
    "lastName": "last_name",
    "jobTitle": "job_title",
    "postalCode": "postal_code",
}


class UnknownFieldError(KeyError):
    """Feldname gehört nicht zum ContactRecord."""


class VCardValidationError(ValueError):
    """Mindestens ein Feld ist ungültig. `errors` enthält Feld → Message-Key."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(f"Ungültige Felder: {', '.join(sorted(errors))}")
        self.errors = dict(errors)


def normalize_field_name(field: str) -> str:
    name = _CAMEL_ALIASES.get(field, field)
    if name not in CONTACT_FIELDS:
        raise UnknownFieldError(field)
    return name


@dataclass(frozen=True)
class ContactRecord:
    first_name: str = ""
    last_name: str = ""
    job_title: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContactRecord":
        """Baut einen Record aus snake_case- oder camelCase-Schlüsseln, Unbekanntes wird ignoriert."""
        values: Dict[str, str] = {}
        for key, value in data.items():
            try:
                name = normalize_field_name(key)
            except UnknownFieldError:
                continue
            values[name] = "" if value is None else str(value)
        return cls(**values)

    def with_field(self, field: str, value: Optional[str]) -> "ContactRecord":
        return replace(self, **{normalize_field_name(field): "" if value is None else str(value)})

    def trimmed(self) -> "ContactRecord":
        return replace(self, **{f.name: getattr(self, f.name).strip() for f in fields(self)})

    def as_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


EMPTY_RECORD = ContactRecord()


# ─────────────────────────────────────────────
# ✅ Formatprüfungen
# ─────────────────────────────────────────────
_EMAIL_RE = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Za-z0-9_'+\-.]*[A-Za-z0-9_+\-]"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}$"
)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def is_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def is_absolute_url(value: str) -> bool:
    """
    Absolute URL mit Schema, z. B. https://example.org/team oder mailto:ana@example.org.
    Mit Authority-Teil (scheme://…) ist ein Host Pflicht.
    """
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
        # Port-Zugriff wirft bei ungültigen Ports
        parts.port
    except ValueError:
        return False
    if not _SCHEME_RE.match(parts.scheme):
        return False
    if value[len(parts.scheme) + 1:].startswith("//"):
        return bool(parts.hostname)
    return True


def _required(value: str) -> bool:
    return value != ""


def _optional(check: Callable[[str], bool]) -> Callable[[str], bool]:
    return lambda value: value == "" or check(value)


def _always(value: str) -> bool:
    return True


# Feld → (Prüfung auf getrimmten Wert, Fehler-Key)
VCARD_RULES: Dict[str, Tuple[Callable[[str], bool], Optional[str]]] = {
    "first_name": (_required, "validation.firstNameRequired"),
    "last_name": (_always, None),
    "job_title": (_always, None),
    "company": (_always, None),
    "email": (_optional(is_email), "validation.emailInvalid"),
    "phone": (_required, "validation.phoneRequired"),
    "website": (_optional(is_absolute_url), "validation.websiteInvalid"),
    "street": (_always, None),
    "city": (_always, None),
    "state": (_always, None),
    "postal_code": (_always, None),
    "country": (_always, None),
}


# ─────────────────────────────────────────────
# 🧠 Validierung
# ─────────────────────────────────────────────
def validate_field(field: str, value: Optional[str]) -> Optional[str]:
    """
    Prüft ein einzelnes Feld (z. B. beim Verlassen des Eingabefelds).
    Gibt None zurück, wenn alles passt, sonst den Message-Key.
    """
    check, message_key = VCARD_RULES[normalize_field_name(field)]
    if check((value or "").strip()):
        return None
    return message_key


def collect_errors(record: ContactRecord) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for name, value in record.as_dict().items():
        message_key = validate_field(name, value)
        if message_key:
            errors[name] = message_key
    return errors


def validate_record(record: ContactRecord) -> ContactRecord:
    """
    Prüft alle Felder und sammelt sämtliche Fehler.
    Gibt den getrimmten Record zurück oder wirft VCardValidationError.
    """
    cleaned = record.trimmed()
    errors = collect_errors(cleaned)
    if errors:
        raise VCardValidationError(errors)
    return cleaned
