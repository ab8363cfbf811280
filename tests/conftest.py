import os
import tempfile

# Configuration is read at import time, so the environment must be ready first.
_db_dir = tempfile.mkdtemp(prefix="crm-tests-")
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["APP_ENV"] = "development"

import httpx  # noqa: E402
import pytest  # noqa: E402

from app.core.db import AsyncSessionLocal, Base, engine  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.models.user_models import User  # noqa: E402
from app.schemas.customer_schemas import CustomerCreate  # noqa: E402
from app.services import customer_service  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture(autouse=True)
async def reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
def store():
    return AsyncSessionLocal


@pytest.fixture
async def user(store):
    async with store() as db:
        u = User(email="owner@example.com", password_hash="not-a-real-hash", name="Owner")
        db.add(u)
        await db.commit()
        await db.refresh(u)
    return u


@pytest.fixture
def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_customer(store, user):
    """Create a customer through the service and return its CustomerOut."""

    async def _make(**fields):
        fields.setdefault("name", "Customer")
        response = await customer_service.create_customer(store, CustomerCreate(**fields), user.id)
        return response.customer

    return _make
