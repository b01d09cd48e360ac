"""POST a JSON payload read from disk and print the response envelope."""

from __future__ import annotations

import os
from pathlib import Path

from restcore import RestClient, response_to_envelope

PAYLOAD_FILE = os.getenv("RESTCORE_DEMO_PAYLOAD", "test.file")
TARGET_FILE = os.getenv("RESTCORE_DEMO_TARGET", "test.file.ip")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def main() -> None:
    payload = Path(PAYLOAD_FILE).read_text(encoding="utf-8")
    target = Path(TARGET_FILE).read_text(encoding="utf-8").strip()
    log_level = os.getenv("RESTCORE_CLIENT_LOG", "info")

    with RestClient(print, log_level=log_level, timeout=int(os.getenv("RESTCORE_TIMEOUT", "0"))) as client:
        client.init_session()
        ok, response = client.post(target, {"Content-Type": "application/json"}, payload)

    if not ok:
        print(f"→ POST to {target} failed")
        return

    log_section("Response envelope")
    print(response_to_envelope(response, escape_body=False))
    log_section("Body")
    print(response.body)


if __name__ == "__main__":
    main()
