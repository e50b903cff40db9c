# utils/session_store.py
# In-Memory-Ablage: ein VCardGenerator pro Browser-Sitzung (nichts wird gespeichert)
# Sitzungen verfallen nach der Cookie-Lebensdauer, die älteste fliegt bei voller Ablage.

from __future__ import annotations

import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from utils.generation import VCardGenerator
from utils.qr_config import get_session_store_limits

logger = logging.getLogger(__name__)

SESSION_KEY = "vcard_session_id"

_limits = get_session_store_limits()
TTL_SECONDS: float = _limits["ttl_seconds"]
MAX_SESSIONS: int = _limits["max_sessions"]

# Key: Session-ID, Value: (Generator, letzter Zugriff); älteste zuerst
_generators: "OrderedDict[str, Tuple[VCardGenerator, float]]" = OrderedDict()

_factory: Callable[[], VCardGenerator] = VCardGenerator
_clock: Callable[[], float] = time.monotonic


def new_session_id() -> str:
    return uuid.uuid4().hex


def _prune(now: float) -> None:
    while _generators:
        session_id, (_, last_access) = next(iter(_generators.items()))
        if now - last_access < TTL_SECONDS and len(_generators) < MAX_SESSIONS:
            break
        _generators.popitem(last=False)
        logger.info(f"🧹 Sitzung verworfen: {session_id[:8]}…")


def get_generator(session_id: str) -> VCardGenerator:
    """Liefert den Generator der Sitzung und legt ihn beim ersten Zugriff an."""
    now = _clock()
    entry = _generators.pop(session_id, None)
    if entry is not None and now - entry[1] >= TTL_SECONDS:
        entry = None
    _prune(now)
    generator = entry[0] if entry is not None else _factory()
    _generators[session_id] = (generator, now)
    return generator


def active_sessions() -> int:
    return len(_generators)


def set_generator_factory(factory: Optional[Callable[[], VCardGenerator]]) -> None:
    """Tests tauschen hier den Encoder aus. None stellt den Standard wieder her."""
    global _factory
    _factory = factory or VCardGenerator


def clear_sessions() -> None:
    _generators.clear()
