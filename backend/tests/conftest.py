"""
Class Service — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── repository: empty InMemoryClassRepository
    ├── oauth_calls / oauth_status: capture and steer the mocked validation endpoint
    ├── token_validator: TokenValidator talking to an httpx.MockTransport
    ├── test_client: HTTPX AsyncClient bound to a fresh application
    └── auth_headers: Authorization header the mocked endpoint accepts
"""

import os

# Override settings for testing BEFORE any class_service imports
os.environ["REPOSITORY_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["OAUTH_INTERNAL_HOST"] = "oauth.test"

from typing import List  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from class_service.repositories import InMemoryClassRepository  # noqa: E402
from class_service.services.token_validator import TokenValidator  # noqa: E402

VALID_TOKEN = "abc.def.ghi"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def repository():
    return InMemoryClassRepository()


@pytest.fixture
def oauth_calls() -> List[httpx.Request]:
    """Every request the mocked OAuth validation endpoint received."""
    return []


@pytest.fixture
def oauth_status():
    """
    Status code the mocked validation endpoint answers with.

    Tests mutate `oauth_status["code"]`, or set `oauth_status["error"]` to an
    exception to simulate an unreachable endpoint.
    """
    return {"code": 200, "error": None}


@pytest_asyncio.fixture
async def token_validator(oauth_calls, oauth_status):
    def handler(request: httpx.Request) -> httpx.Response:
        oauth_calls.append(request)
        if oauth_status["error"] is not None:
            raise oauth_status["error"]
        return httpx.Response(oauth_status["code"])

    validator = TokenValidator(
        "http://oauth.test:8080/validate", transport=httpx.MockTransport(handler)
    )
    yield validator
    await validator.aclose()


@pytest_asyncio.fixture
async def test_client(repository, token_validator):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from class_service.main import create_app

    app = create_app(repository=repository, token_validator=token_validator)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {VALID_TOKEN}"}
