import os
import tempfile

# Settings are read once at import time, so the environment must be in place
# before anything from `app` is imported.
_tmp_dir = tempfile.mkdtemp(prefix="recipe-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ["DATABASE_SSL"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp_dir, "uploads")
os.environ["ENVIRONMENT"] = "test"
for name in ("SENTRY_DSN", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "S3_BUCKET_NAME"):
    os.environ.pop(name, None)

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.db.database import AsyncSessionLocal, Base, engine  # noqa: E402
from app.main import app  # noqa: E402

UPLOAD_DIR = os.environ["UPLOAD_DIR"]


@pytest_asyncio.fixture(autouse=True)
async def reset_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Pooled connections belong to this test's event loop
    await engine.dispose()


@pytest_asyncio.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client, name="Ann", email=None, password="pw123"):
    """Register a user; returns (token, user dict)."""
    email = email or f"{name.lower()}@x.com"
    res = await client.post(
        "/api/users/register", json={"name": name, "email": email, "password": password}
    )
    assert res.status_code == 201, res.text
    data = res.json()
    return data["token"], data["user"]


async def create_recipe(client, token, title="Pancakes", description="Fluffy and quick"):
    res = await client.post(
        "/api/recipes", json={"title": title, "description": description}, headers=auth(token)
    )
    assert res.status_code == 201, res.text
    return res.json()
