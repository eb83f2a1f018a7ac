"""
Basic Requests
==============

Demonstrates the per-method helpers on Client: GET with query arguments,
POST with raw content and DELETE, plus status-class checks.
"""

import httpseam


def main() -> None:
    with httpseam.Client() as client:
        # ── GET with query arguments ─────────────────────────────────────
        response = client.perform_get_request(
            "https://httpbin.org/get?source=example",
            args={"page": "2", "q": "hello world"},
        )
        print(f"GET    → {response.get_status_code()} {response.get_reason_phrase()}")
        print(f"  Class: {response.get_status_class()}")
        print()

        # ── POST with raw bytes ──────────────────────────────────────────
        response = client.perform_post_request(
            "https://httpbin.org/post",
            headers={"X-Trace": "basic-example"},
            content=b"Hello, world!",
        )
        print(f"POST   → {response.get_status_code()}")
        print(f"  Body length: {len(response.read_as_bytes())}")
        print()

        # ── DELETE ───────────────────────────────────────────────────────
        response = client.perform_delete_request("https://httpbin.org/delete")
        print(f"DELETE → {response.get_status_code()}")

        # ── Status classes ───────────────────────────────────────────────
        response = client.perform_get_request("https://httpbin.org/status/404")
        if response.get_status_class() is httpseam.StatusClass.ERROR:
            print(f"404 is a client error: {response!r}")


if __name__ == "__main__":
    main()
