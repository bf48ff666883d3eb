"""Shared pytest fixtures for tugza tests."""

import os

# Must be set before tugza.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOAD_RETRY_DELAY_SECONDS"] = "0"

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tugza import crud, deps
from tugza.auth_utils import get_password_hash
from tugza.database import Base
from tugza.location_service import LocationClient
from tugza.main import app
from tugza.upload_service import UploadClient

OPERATOR_EMAIL = "ops@tugza.tech"
OPERATOR_PASSWORD = "s3cret-pass"
PHOTO_URL = "https://cdn.tugza.tech/id-photos/abebe.png"

COUNTRIES = [{"id": 1, "name": "Ethiopia"}, {"id": 2, "name": "Kenya"}]
STATES = {"1": [{"id": 10, "name": "Addis Ababa"}, {"id": 11, "name": "Oromia"}]}
CITIES = {("1", "10"): [{"id": 100, "name": "Addis Ababa"}], ("1", "11"): [{"id": 110, "name": "Adama"}]}


class RecordingHandler:
    """httpx.MockTransport handler replaying canned responses.

    The last response repeats once the list is exhausted. An exception in the
    list is raised instead of answering.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def location_api(request: httpx.Request) -> httpx.Response:
    params = request.url.params
    if "stateId" in params:
        return httpx.Response(200, json={"cities": CITIES.get((params["countryId"], params["stateId"]), [])})
    if "countryId" in params:
        return httpx.Response(200, json={"states": STATES.get(params["countryId"], [])})
    return httpx.Response(200, json={"countries": COUNTRIES})


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def upload_handler():
    return RecordingHandler(httpx.Response(200, json={"url": PHOTO_URL}))


@pytest.fixture
def uploader(upload_handler):
    return UploadClient(
        "https://upload.test/api/upload",
        folder="id-photos",
        max_attempts=3,
        retry_delay=0,
        transport=httpx.MockTransport(upload_handler),
    )


@pytest.fixture
def locations():
    return LocationClient("https://locations.test", timeout=1, transport=httpx.MockTransport(location_api))


@pytest_asyncio.fixture
async def client(session_factory, uploader, locations):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_upload_client] = lambda: uploader
    app.dependency_overrides[deps.get_location_client] = lambda: locations
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def operator(db):
    return await crud.create_operator(db, OPERATOR_EMAIL, get_password_hash(OPERATOR_PASSWORD))


@pytest_asyncio.fixture
async def auth_headers(client, operator):
    response = await client.post("/auth/token", data={"username": OPERATOR_EMAIL, "password": OPERATOR_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def signup_data():
    return {
        "name": "Abebe Kebede",
        "email": "abebe@example.com",
        "phone": "0911223344",
        "address": "Bole Road 12",
        "state": "10",
        "city": "addis-ababa",
        "account_type": "savings",
        "initial_deposit": 500,
        "bank": "coop",
        "terms": True,
    }


@pytest.fixture
def new_voucher_data():
    return {
        "name": "Almaz Tesfaye",
        "country": "Ethiopia",
        "state": "Oromia",
        "city": "Adama",
        "phone": "0922334455",
        "amount": 500,
        "business_tin": "0012345678",
    }
