# =============================================================================
# 🚀 vCard QR – Hauptapplikation (main.py)
# =============================================================================

from __future__ import annotations
import logging
from pathlib import Path

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware
from dotenv import load_dotenv

# -------------------------------------------------------------------------
# 1️⃣ .env laden (muss ganz oben sein!)
# -------------------------------------------------------------------------
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path)

from utils.qr_config import get_log_level, get_session_settings  # noqa: E402

# -------------------------------------------------------------------------
# 2️⃣ Logging
# -------------------------------------------------------------------------
logging.basicConfig(
    level=get_log_level(),
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# 3️⃣ FastAPI App
# -------------------------------------------------------------------------
app = FastAPI(title="vCard QR", version="1.0")

# -------------------------------------------------------------------------
# 4️⃣ Session Middleware
# -------------------------------------------------------------------------
app.add_middleware(SessionMiddleware, **get_session_settings())

# -------------------------------------------------------------------------
# 5️⃣ Routen laden
# -------------------------------------------------------------------------
from routes import vcard  # noqa: E402

app.include_router(vcard.router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


logger.info("🧩 vCard QR gestartet")
