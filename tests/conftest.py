import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from jsend.config import get_settings
from jsend.response import JSendResponse

SETTINGS_ENV_VARS = ("JSEND_LOG_LEVEL", "JSEND_LOG_FILE", "JSEND_MAX_DEPTH", "JSEND_ENCODING_OPTIONS")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings"""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_data():
    return {
        "user": {
            "id": 1,
            "first_name": "foo",
            "posts": [1, 5, 8],
        },
    }


@pytest.fixture
def responses(sample_data):
    """One response of every status, with and without data"""
    return {
        "success": JSendResponse.success(),
        "success_with_data": JSendResponse.success(sample_data),
        "fail": JSendResponse.fail(),
        "fail_with_data": JSendResponse.fail(sample_data),
        "error": JSendResponse.error("error"),
        "error_with_data": JSendResponse.error("error", 42, sample_data),
    }


class RecordingSink:
    """Collects the effects of JSendResponse.respond in call order"""

    def __init__(self):
        self.calls = []

    def set_header(self, name, value):
        self.calls.append(("header", name, value))

    def write(self, body):
        self.calls.append(("write", body))


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def app_client():
    """FastAPI app with the JSend exception handlers and a few routes that raise"""
    from fastapi import HTTPException, Request, status
    from pydantic import BaseModel

    from jsend.exception_handlers import register_exception_handlers
    from jsend.http import JSendJSONResponse

    app = FastAPI()
    register_exception_handlers(app)

    class Item(BaseModel):
        name: str
        quantity: int

    @app.get("/ok")
    def ok():
        return JSendJSONResponse(JSendResponse.success({"hello": "world"}))

    @app.post("/items")
    def create_item(item: Item):
        return JSendJSONResponse(JSendResponse.success({"item": item.model_dump()}), status_code=201)

    @app.post("/echo")
    async def echo(request: Request):
        body = await request.body()
        return JSendJSONResponse(JSendResponse.decode(body), status_code=status.HTTP_200_OK)

    @app.get("/missing")
    def missing():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

    @app.get("/bad-input")
    def bad_input():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"name": "Name is required"})

    @app.get("/unavailable")
    def unavailable():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database not initialized")

    @app.get("/crash")
    def crash():
        raise RuntimeError("boom")

    return TestClient(app, raise_server_exceptions=False)
