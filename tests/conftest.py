import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_generation_client, get_session_store
from app.api.endpoints.processing import JobStore, get_job_store
from app.core.exceptions import RemoteGenerationError
from app.models.account import Profile
from app.models.content import GenerationRequest, GenerationResult, SeoData
from app.services.session_store import InMemorySessionStore


def marketing_kit(descriptions=("First copy", "Second copy"), keywords=("thermos", "bottle")):
    return GenerationResult(
        descriptions=list(descriptions),
        seo=SeoData(metaTitle="Meta title", metaDescription="Meta description", keywords=list(keywords)),
        featureBullets=["Keeps heat"],
        targetAudience="Commuters",
        callToActions=["Buy now"],
        hashtags=["thermos"],
    )


class FakeGenerationClient:
    """Returns canned results keyed by product name; exceptions are raised."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default if default is not None else marketing_kit()
        self.calls = []

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        self.calls.append(request)
        outcome = self.responses.get(request.productName, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_client():
    return FakeGenerationClient()


@pytest.fixture
def session_store():
    return InMemorySessionStore({
        "fresh-token": Profile(id="user-1", email="fresh@example.com", usage_count=0),
        "spent-token": Profile(id="user-2", email="spent@example.com", usage_count=3),
    })


@pytest.fixture
def api(fake_client, session_store):
    from main import app

    app.dependency_overrides[get_generation_client] = lambda: fake_client
    app.dependency_overrides[get_session_store] = lambda: session_store
    job_store = JobStore()
    app.dependency_overrides[get_job_store] = lambda: job_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def failing(message="timeout"):
    return RemoteGenerationError(message)
