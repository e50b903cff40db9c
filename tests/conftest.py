import sys, os, asyncio, pytest, pytest_asyncio, httpx
from httpx import ASGITransport

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from main import app
from utils import session_store
from utils.generation import VCardGenerator

FAKE_ARTIFACT = "data:image/png;base64,iVBORw0KGgo="


class FakeEncoder:
    """Asynchroner Test-Encoder: zählt Aufrufe, kann blockieren oder fehlschlagen."""

    def __init__(self, fail: bool = False, block: bool = False):
        self.fail = fail
        self.calls = []
        self.release = asyncio.Event()
        if not block:
            self.release.set()

    async def __call__(self, payload, **options):
        self.calls.append((payload, options))
        await self.release.wait()
        if self.fail:
            raise RuntimeError("encoder kaputt")
        return FAKE_ARTIFACT


@pytest.fixture
def fake_encoder():
    return FakeEncoder()


@pytest.fixture
def generators(fake_encoder):
    """Alle Generatoren, die die Routen während eines Tests anlegen."""
    created = []

    def factory():
        generator = VCardGenerator(encoder=fake_encoder)
        created.append(generator)
        return generator

    session_store.set_generator_factory(factory)
    yield created
    session_store.set_generator_factory(None)
    session_store.clear_sessions()


@pytest_asyncio.fixture
async def client(generators):
    """Erstellt einen funktionierenden Testclient."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
