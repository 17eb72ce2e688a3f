import os
import uuid
from datetime import date
from pathlib import Path

import pytest

# Must be set before runlog.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TIMEZONE"] = "UTC"

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def sample():
    def read(name: str) -> str:
        return (DATA_DIR / name).read_text(encoding="utf-8")
    return read


@pytest.fixture
def today():
    return date(2025, 6, 15)


@pytest.fixture
def client(today):
    from fastapi.testclient import TestClient  # noqa: WPS433
    from runlog.api.deps import get_today  # noqa: WPS433
    from runlog.main import app  # noqa: WPS433

    app.dependency_overrides[get_today] = lambda: today
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    # Fresh user per test; the shared in-memory db never leaks rows across users
    return {"X-User-Id": str(uuid.uuid4()), "X-User-Email": "runner@example.com"}
