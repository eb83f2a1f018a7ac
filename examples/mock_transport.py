"""
Mock Transport & Async Client
=============================

Answers requests in-process with MockTransport, which is handy for unit
tests, then runs a few requests concurrently with AsyncClient.
"""

import asyncio

import httpx

import httpseam


def handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/missing":
        return httpx.Response(404, text="nope")
    return httpx.Response(200, json={"path": request.url.path, "query": str(request.url.query, "ascii")})


def sync_demo() -> None:
    print("── Sync client with MockTransport ──────────────────────────────")
    with httpseam.Client(httpseam.MockTransport(handler)) as client:
        response = client.perform_get_request("https://api.test/items", args={"page": "3"})
        print(f"  {response!r} {response.read_as_text()}")
        response = client.perform_get_request("https://api.test/missing")
        print(f"  {response!r} class={response.get_status_class()}")
    print()


async def async_demo() -> None:
    print("── Async client, three requests at once ────────────────────────")
    async with httpseam.AsyncClient(httpseam.AsyncMockTransport(handler)) as client:
        responses = await asyncio.gather(
            *(client.perform_get_request(f"https://api.test/items/{i}") for i in range(3))
        )
        for response in responses:
            print(f"  {response!r} {await response.aread_as_text()}")


if __name__ == "__main__":
    sync_demo()
    asyncio.run(async_demo())
