"""
Integration fixtures: the real routers, dependencies and error handlers
over a mongomock-backed repository and a mocked email provider.
"""

import os
from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config import AppSettings, DatabaseSettings, JWTSettings
from errors import register_error_handlers
from routes.account_routes import router as account_router
from routes.auth_routes import router as auth_router
from routes.message_routes import router as message_router

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")


@pytest.fixture
def app_settings():
    return AppSettings(
        db=DatabaseSettings(mongodb_uri="mongodb://localhost:27017/"),
        jwt=JWTSettings(
            jwt_secret="test-secret-with-enough-length-for-hs256",
            jwt_private_key="",
            jwt_public_key="",
            cookie_secure=False,
        ),
    )


@pytest.fixture
def client(app_settings, account_repository, email_provider):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = app_settings
        app.state.db = None
        app.state.account_repository = account_repository
        app.state.email_provider = email_provider
        yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(account_router)
    app.include_router(message_router)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sign_in(client):
    """Sign in and return bearer headers for the given credentials."""

    def _sign_in(identifier: str = "alice", password: str = "secret123") -> dict:
        resp = client.post("/sign-in", json={"identifier": identifier, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _sign_in
