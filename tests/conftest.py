from __future__ import annotations

from pathlib import Path
import sys


import pytest
from fastapi.testclient import TestClient


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def settings():
    from settings import Settings

    return Settings(
        public_base_url="",
        log_level="DEBUG",
        debug_log_requests=True,
        cors_allow_origins=("*",),
        random_attribute_key="dummy-data",
    )


@pytest.fixture
def store():
    from persistence import InMemoryDocumentStore

    return InMemoryDocumentStore()


@pytest.fixture
def resource(store):
    from endpoints.document_endpoints import DocumentResource

    return DocumentResource(store)


@pytest.fixture
def client(store, settings) -> TestClient:
    """
    A fresh app per test, backed by the `store` fixture so tests can inspect state directly.
    """
    import app as app_module

    return TestClient(app_module.create_app(store=store, settings=settings))
