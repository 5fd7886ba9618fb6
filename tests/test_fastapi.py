from __future__ import annotations

import fastapi
from fastapi.testclient import TestClient

from ccpolicy import CachePolicy, PolicyOptions
from ccpolicy.asgi import ASGICacheControlMiddleware
from ccpolicy.fastapi import CachePolicyDep


def create_app(options: PolicyOptions | None = None) -> fastapi.FastAPI:
    app = fastapi.FastAPI()
    app.add_middleware(ASGICacheControlMiddleware, options=options)

    @app.get("/profile")
    async def get_profile(policy: CachePolicy = CachePolicyDep):
        policy.private_cache().set_max_age(300)
        return {"name": "John"}

    @app.get("/news")
    async def get_news(policy: CachePolicy = CachePolicyDep):
        policy.public_cache().set_max_age(300).set_shared_max_age(3600)
        return {"news": "articles"}

    @app.get("/missing")
    async def get_missing(policy: CachePolicy = CachePolicyDep):
        policy.public_cache()
        raise fastapi.HTTPException(status_code=404)

    @app.get("/plain")
    async def get_plain():
        return {"plain": True}

    return app


def test_private_endpoint():
    with TestClient(create_app()) as client:
        response = client.get("/profile")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "private, must-revalidate, max-age=300"
    assert response.headers["vary"] == "X-Requested-With, X-Forwarded-Protocol"


def test_public_endpoint():
    with TestClient(create_app()) as client:
        response = client.get("/news")

    assert response.headers["cache-control"] == "public, must-revalidate, max-age=300, s-maxage=3600"


def test_http_exception_disables_cache():
    with TestClient(create_app()) as client:
        response = client.get("/missing")

    assert response.status_code == 404
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"


def test_endpoint_without_dependency():
    with TestClient(create_app(PolicyOptions(vary=None))) as client:
        response = client.get("/plain")

    assert response.headers["cache-control"] == "must-revalidate"
    assert "vary" not in response.headers


def test_dependency_without_middleware():
    app = fastapi.FastAPI()

    @app.get("/")
    async def index(response: fastapi.Response, policy: CachePolicy = CachePolicyDep):
        policy.disable_cache()
        response.headers.update(policy.generate_headers())
        return {}

    with TestClient(app) as client:
        response = client.get("/")

    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
