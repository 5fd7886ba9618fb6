# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "ccpolicy[fastapi]",
#     "httpx",
# ]
#
# [tool.uv.sources]
# ccpolicy = { path = "../", editable = true }
# ///


import asyncio

import httpx
from fastapi import FastAPI, HTTPException

from ccpolicy import CachePolicy
from ccpolicy.asgi import ASGICacheControlMiddleware
from ccpolicy.fastapi import CachePolicyDep

app = FastAPI()
app.add_middleware(ASGICacheControlMiddleware)


def layout(policy: CachePolicy) -> None:
    # shared page chrome asks for public caching, without knowing about the page
    policy.public_cache().set_max_age(60)


@app.get("/articles/")
async def read_articles(policy: CachePolicy = CachePolicyDep):
    layout(policy)
    return {"articles": []}


@app.get("/account/")
async def read_account(policy: CachePolicy = CachePolicyDep):
    policy.disable_cache(force=True)
    layout(policy)
    return {"user": "john"}


@app.get("/missing/")
async def read_missing(policy: CachePolicy = CachePolicyDep):
    layout(policy)
    raise HTTPException(status_code=404)


async def main():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app)) as client:
        for path in ("/articles/", "/account/", "/missing/"):
            response = await client.get(f"http://testserver{path}")
            print(f"{path:12} {response.status_code} Cache-Control: {response.headers['cache-control']}")


if __name__ == "__main__":
    asyncio.run(main())
