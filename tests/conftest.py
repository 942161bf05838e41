import sys
from pathlib import Path

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.testclient import TestClient
from pydantic import BaseModel

# Ensure repository root is importable without an install
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jsonenvelope import Envelope  # noqa: E402
from jsonenvelope.middleware.errors import register_exception_handlers  # noqa: E402
from jsonenvelope.middleware.request_id import RequestIdMiddleware  # noqa: E402
from jsonenvelope.transport import from_request, to_response  # noqa: E402


class Car(BaseModel):
    color: str
    type: str


def build_app() -> FastAPI:
    template = Envelope(api_version="0.1", params={"region": "eu"})
    app = FastAPI()
    register_exception_handlers(app, template=template)
    app.add_middleware(RequestIdMiddleware)

    @app.get("/cars/{color}")
    async def get_car(color: str):
        if color == "none":
            raise HTTPException(status_code=404, detail="Car Not Found")
        envelope = template.copy_metadata()
        envelope.method = "cars.get"
        envelope.data.kind = "car"
        envelope.data.add_item(Car(color=color, type="SUV"))
        return to_response(envelope)

    @app.post("/cars")
    async def insert_cars(request: Request):
        inbound = await from_request(request)
        envelope = inbound.copy_metadata()
        envelope.method = "cars.insert"
        envelope.context = inbound.context
        for car in inbound.data.iter_items(Car):
            envelope.data.add_item(car)
        return to_response(envelope, status_code=201)

    @app.get("/search")
    async def search(limit: int):
        return to_response(template.copy_metadata())

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    return app


@pytest.fixture(scope="session")
def client():
    with TestClient(build_app()) as c:
        yield c
