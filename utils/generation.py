# utils/generation.py
# =============================================================================
# ⚙️ vCard-QR Generierung – Zustandsmaschine
# -----------------------------------------------------------------------------
# Idle → Generating → Succeeded(artifact) | Failed(error_key)
# - validiert den kompletten Record vor jeder Anfrage
# - höchstens EINE Encoder-Anfrage gleichzeitig
# - keine automatischen Wiederholungen, kein Timeout
# =============================================================================

from __future__ import annotations

import asyncio
import inspect
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from utils.export_name import export_filename
from utils.qr_config import get_encoder_options
from utils.qr_generator import decode_data_uri, generate_qr_data_uri
from utils.vcard_builder import build_vcard
from utils.vcard_schema import (
    EMPTY_RECORD,
    ContactRecord,
    VCardValidationError,
    normalize_field_name,
    validate_field,
    validate_record,
)

logger = logging.getLogger(__name__)

GENERATION_FAILED_KEY = "messages.errors.generationFailed"
HELPER_KEY = "messages.helper"

Encoder = Callable[..., Any]


class InvalidTransitionError(RuntimeError):
    """Übergang ist im aktuellen Zustand nicht erlaubt."""


class NoArtifactError(LookupError):
    """Es gibt (noch) keinen erzeugten QR-Code."""


class GenerationStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationState:
    status: GenerationStatus
    record: ContactRecord
    field_errors: Dict[str, str] = field(default_factory=dict)
    artifact: Optional[str] = None
    error_key: Optional[str] = None
    helper_key: str = HELPER_KEY

    def as_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "record": self.record.as_dict(),
            "field_errors": dict(self.field_errors),
            "artifact": self.artifact,
            "error_key": self.error_key,
            "helper_key": self.helper_key,
        }


class VCardGenerator:
    """
    Hält Record, Feldfehler und Generierungszustand einer Sitzung.

    Der Encoder bekommt den vCard-Text plus Optionen
    (error_correction, margin, scale) und liefert das Artefakt.
    Synchrone Encoder laufen in einem Worker-Thread.
    """

    def __init__(self, encoder: Optional[Encoder] = None, encoder_options: Optional[Mapping[str, Any]] = None):
        self._encoder: Encoder = encoder or generate_qr_data_uri
        self._encoder_options: Dict[str, Any] = dict(encoder_options or get_encoder_options())
        self.record: ContactRecord = EMPTY_RECORD
        self.field_errors: Dict[str, str] = {}
        self.status: GenerationStatus = GenerationStatus.IDLE
        self.artifact: Optional[str] = None
        self.error_key: Optional[str] = None
        self.last_payload: Optional[str] = None
        self._in_flight = False
        self._request_id = 0

    # ------------------------------------------------------------------
    # 🧾 Eingaben
    # ------------------------------------------------------------------
    @property
    def is_generating(self) -> bool:
        return self._in_flight

    @property
    def helper_key(self) -> str:
        if self.error_key and not self.artifact:
            return self.error_key
        return HELPER_KEY

    def update_field(self, field_name: str, value: Optional[str]) -> None:
        self.record = self.record.with_field(field_name, value)

    def replace_record(self, data: Mapping[str, Any]) -> None:
        self.record = ContactRecord.from_dict(data)

    def blur_field(self, field_name: str, value: Optional[str] = None) -> Optional[str]:
        """Validiert ein Feld sofort. Ein übergebener Wert wird vorher übernommen."""
        name = normalize_field_name(field_name)
        if value is not None:
            self.update_field(name, value)
        message_key = validate_field(name, getattr(self.record, name))
        if message_key:
            self.field_errors[name] = message_key
        else:
            self.field_errors.pop(name, None)
        return message_key

    def preview(self) -> str:
        return build_vcard(validate_record(self.record))

    # ------------------------------------------------------------------
    # 🚀 Generierung
    # ------------------------------------------------------------------
    @contextmanager
    def _in_flight_request(self, previous: Tuple[GenerationStatus, Optional[str], Optional[str]]) -> Iterator[int]:
        self._request_id += 1
        request_id = self._request_id
        self._in_flight = True
        try:
            yield request_id
        finally:
            # reset() hat die Anfrage evtl. schon verworfen
            if request_id == self._request_id:
                self._in_flight = False
                # abgebrochen (CancelledError): vorherigen Zustand wiederherstellen
                if self.status is GenerationStatus.GENERATING:
                    self.status, self.artifact, self.error_key = previous

    async def _encode(self, payload: str) -> Any:
        encoder = self._encoder
        if inspect.iscoroutinefunction(encoder) or inspect.iscoroutinefunction(getattr(encoder, "__call__", None)):
            return await encoder(payload, **self._encoder_options)
        return await asyncio.to_thread(encoder, payload, **self._encoder_options)

    async def submit(self) -> bool:
        """
        Validiert den Record und startet genau eine Encoder-Anfrage.
        Gibt False zurück, wenn nichts angefragt wurde (ungültig oder schon aktiv).
        """
        if self._in_flight:
            logger.warning("⚠️ Generierung läuft bereits – Submit ignoriert")
            return False

        try:
            cleaned = validate_record(self.record)
        except VCardValidationError as e:
            self.field_errors = e.errors
            logger.warning(f"⚠️ Ungültige Felder: {', '.join(sorted(e.errors))}")
            return False

        previous = (self.status, self.artifact, self.error_key)
        self.field_errors = {}
        self.error_key = None
        self.artifact = None
        payload = build_vcard(cleaned)
        self.last_payload = payload

        with self._in_flight_request(previous) as request_id:
            self.status = GenerationStatus.GENERATING
            try:
                artifact = await self._encode(payload)
            except Exception:
                if request_id == self._request_id:
                    logger.exception("❌ QR-Code konnte nicht erzeugt werden")
                    self.status = GenerationStatus.FAILED
                    self.error_key = GENERATION_FAILED_KEY
                return True

            if request_id != self._request_id:
                logger.info("↩️ Ergebnis einer verworfenen Anfrage ignoriert")
                return True

            self.artifact = artifact
            self.status = GenerationStatus.SUCCEEDED
            logger.info(f"✅ vCard-QR erzeugt ({len(payload)} Zeichen)")
        return True

    # ------------------------------------------------------------------
    # 🔄 Zurücksetzen / Schließen
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._request_id += 1
        self._in_flight = False
        self.record = EMPTY_RECORD
        self.field_errors = {}
        self.artifact = None
        self.error_key = None
        self.last_payload = None
        self.status = GenerationStatus.IDLE

    def dismiss(self) -> None:
        if self.status is not GenerationStatus.SUCCEEDED:
            raise InvalidTransitionError(f"Schließen nicht möglich im Zustand '{self.status.value}'")
        self.artifact = None
        self.status = GenerationStatus.IDLE

    # ------------------------------------------------------------------
    # 💾 Download
    # ------------------------------------------------------------------
    def download(self) -> Tuple[str, bytes]:
        """Gibt (Dateiname, PNG-Bytes) des aktuellen QR-Codes zurück."""
        if not self.artifact:
            raise NoArtifactError("Kein QR-Code vorhanden")
        _, data = decode_data_uri(self.artifact)
        return export_filename(self.record.first_name, self.record.last_name), data

    def snapshot(self) -> GenerationState:
        return GenerationState(
            status=self.status,
            record=self.record,
            field_errors=dict(self.field_errors),
            artifact=self.artifact,
            error_key=self.error_key,
            helper_key=self.helper_key,
        )
