"""
Form and Multipart Bodies
=========================

Builds a Request by hand, first with form-urlencoded fields and then with
a multipart body holding a text field and a file part.
"""

import io

import httpseam


def main() -> None:
    with httpseam.Client() as client:
        # ── Form-urlencoded ──────────────────────────────────────────────
        request = httpseam.Request("POST", "https://httpbin.org/post")
        request.add_form_url_encoded_content("name", "Ann Lee")
        request.add_form_url_encoded_content("city", "Oslo")
        response = client.perform_request(request)
        print(f"Form      → {response.get_status_code()}")
        print()

        # ── Multipart with a file part ───────────────────────────────────
        request = httpseam.Request("POST", "https://httpbin.org/post")
        request.set_header("Accept", "application/json")
        request.add_multipart_form_data_content("description", "quarterly report")
        request.add_multipart_form_data_content(
            "file", io.BytesIO(b"col1,col2\n1,2\n"), "report.csv"
        )
        response = client.perform_request(request)
        print(f"Multipart → {response.get_status_code()}")
        print(response.read_as_text()[:200])


if __name__ == "__main__":
    main()
