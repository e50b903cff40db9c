# routes/vcard.py
# =============================================================================
# 🚀 vCard QR-Code Routes
# -----------------------------------------------------------------------------
# JSON-Schnittstelle für das vCard-Formular: Felder setzen, Feld prüfen,
# QR erzeugen, zurücksetzen, schließen und als PNG herunterladen.
# Jede Browser-Sitzung hat ihren eigenen Generator (nur im Speicher).
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from utils.generation import InvalidTransitionError, NoArtifactError, VCardGenerator
from utils.session_store import SESSION_KEY, get_generator, new_session_id
from utils.vcard_schema import UnknownFieldError, VCardValidationError, normalize_field_name

router = APIRouter(prefix="/vcard", tags=["vCard QR"])


class FieldValueIn(BaseModel):
    value: str = ""


class FieldBlurIn(BaseModel):
    value: Optional[str] = None


def _current_generator(request: Request) -> VCardGenerator:
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        session_id = new_session_id()
        request.session[SESSION_KEY] = session_id
    return get_generator(session_id)


def _field_or_404(field: str) -> str:
    try:
        return normalize_field_name(field)
    except UnknownFieldError:
        raise HTTPException(404, f"Unbekanntes Feld: {field}")


# =============================================================================
# 🧾 STATUS & EINGABEN
# =============================================================================

@router.get("/")
def get_state(request: Request) -> Dict[str, Any]:
    """Aktueller Zustand (Record, Feldfehler, Status, QR)."""
    return _current_generator(request).snapshot().as_dict()


@router.put("/fields/{field}")
def update_field(field: str, body: FieldValueIn, request: Request) -> Dict[str, Any]:
    generator = _current_generator(request)
    generator.update_field(_field_or_404(field), body.value)
    return generator.snapshot().as_dict()


@router.post("/fields/{field}/blur")
def blur_field(field: str, body: FieldBlurIn, request: Request) -> Dict[str, Any]:
    """Sofort-Validierung, wenn ein Feld den Fokus verliert."""
    generator = _current_generator(request)
    name = _field_or_404(field)
    error = generator.blur_field(name, body.value)
    return {"field": name, "error": error, "state": generator.snapshot().as_dict()}


@router.put("/record")
def replace_record(body: Dict[str, Optional[str]], request: Request) -> Dict[str, Any]:
    generator = _current_generator(request)
    generator.replace_record(body)
    return generator.snapshot().as_dict()


@router.get("/preview")
def preview_vcard(request: Request) -> Response:
    """Zeigt den vCard-Text, der kodiert werden würde."""
    generator = _current_generator(request)
    try:
        text = generator.preview()
    except VCardValidationError as e:
        return JSONResponse(status_code=422, content={"errors": e.errors})
    return Response(content=text, media_type="text/vcard")


# =============================================================================
# ✅ GENERIERUNG
# =============================================================================

@router.post("/submit")
async def submit_vcard(request: Request) -> JSONResponse:
    generator = _current_generator(request)
    if generator.is_generating:
        raise HTTPException(409, "QR-Code wird bereits erzeugt")

    issued = await generator.submit()
    state = generator.snapshot().as_dict()
    if not issued:
        if generator.is_generating:
            raise HTTPException(409, "QR-Code wird bereits erzeugt")
        return JSONResponse(status_code=422, content={"errors": state["field_errors"], "state": state})
    return JSONResponse(status_code=200, content=state)


@router.post("/reset")
def reset_vcard(request: Request) -> Dict[str, Any]:
    generator = _current_generator(request)
    generator.reset()
    return generator.snapshot().as_dict()


@router.post("/dismiss")
def dismiss_qr(request: Request) -> Dict[str, Any]:
    generator = _current_generator(request)
    try:
        generator.dismiss()
    except InvalidTransitionError as e:
        raise HTTPException(409, str(e))
    return generator.snapshot().as_dict()


@router.get("/download")
def download_qr(request: Request) -> Response:
    """Liefert den QR-Code als PNG-Datei."""
    generator = _current_generator(request)
    try:
        filename, data = generator.download()
    except NoArtifactError:
        raise HTTPException(404, "Kein QR-Code vorhanden")
    return Response(
        content=data,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
