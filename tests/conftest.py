"""
Resourceful — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped, fresh for each test):
    ├── post_source:        MemoryDataSource of Post records
    ├── api:                API with prefix /v1/ and the posts resource
    ├── app:                FastAPI app built by create_app(api)
    ├── test_client:        HTTPX AsyncClient talking to `app`
    └── recording_controller: Controller that records every hook call
"""

import os
from typing import Any, List, Optional

# Override settings before any package import
os.environ["RESOURCEFUL_LOG_LEVEL"] = "WARNING"
os.environ["RESOURCEFUL_API_PREFIX"] = "/"
os.environ["RESOURCEFUL_FIELD_NAMING"] = "camel"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from pydantic import BaseModel, Field  # noqa: E402

from resourceful.api import API  # noqa: E402
from resourceful.main import create_app  # noqa: E402
from resourceful.resource import Controller  # noqa: E402
from resourceful.sources.memory import MemoryDataSource  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Record Types
# ══════════════════════════════════════════════════════════════════════════

class Author(BaseModel):
    name: str
    email: Optional[str] = None


class Post(BaseModel):
    id: str = ""
    title: str
    body: str = ""
    view_count: int = 0
    published: bool = False
    tags: List[str] = Field(default_factory=list)
    author: Optional[Author] = None


# ══════════════════════════════════════════════════════════════════════════
# Controllers
# ══════════════════════════════════════════════════════════════════════════

class RecordingController(Controller):
    """Records every hook call; returns values unchanged."""

    def __init__(self):
        self.calls: List[tuple] = []

    def find_all(self, request, records):
        self.calls.append(("find_all", records))

    def find_one(self, request, record):
        self.calls.append(("find_one", record))

    def create(self, request, record):
        self.calls.append(("create", record))

    def update(self, request, record):
        self.calls.append(("update", record))

    def delete(self, request, id):
        self.calls.append(("delete", id))

    def hooks(self) -> List[str]:
        return [name for name, _ in self.calls]


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def post_source() -> MemoryDataSource:
    return MemoryDataSource(Post)


@pytest.fixture
def seeded_source(post_source) -> MemoryDataSource:
    """Three stored posts with ids "1", "2", "3"."""
    for title in ("first", "second", "third"):
        post_source.create(Post(title=title))
    return post_source


@pytest.fixture
def api(post_source) -> API:
    api = API(prefix="/v1/")
    api.add_resource(Post, post_source)
    return api


@pytest.fixture
def recording_controller() -> RecordingController:
    return RecordingController()


@pytest.fixture
def app(api):
    return create_app(api)


@pytest_asyncio.fixture
async def test_client(app) -> Any:
    """
    HTTPX AsyncClient routed straight to the app through ASGITransport.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/v1/posts")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
