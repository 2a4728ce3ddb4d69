"""
Shared fixtures for the test suite.

Centralizes the containers and HTTP client that several test files use.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app
from core.music_theory import Scale, build_scale

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CLUSTERED_SOURCES: list[int] = [1, 2, 4, 5, 6, 7, 9, 10]
"""Eight source pitch classes that naive fitting squeezes onto six C major notes."""


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


@pytest.fixture
def c_major() -> Scale:
    """C major: pitch classes {0, 2, 4, 5, 7, 9, 11}."""
    return build_scale("C", "major")


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    """TestClient for the FastAPI app."""
    return TestClient(app)
