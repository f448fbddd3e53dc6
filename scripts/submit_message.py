#!/usr/bin/env python3
"""
Smoke client: submit one message to a running API and print the stored row.

Usage:
  ACCESS_TOKEN=<supabase user jwt> python scripts/submit_message.py "hola tonto"

API_BASE_URL defaults to http://localhost:8000.
"""

import asyncio
import json
import os
import sys

import httpx


API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


async def submit_message(message: str, token: str) -> int:
    """POST the message; return a process exit code."""
    async with httpx.AsyncClient(timeout=None) as client:
        print(f"Submitting to {API_BASE_URL}/submit-message ...")
        response = await client.post(
            f"{API_BASE_URL}/submit-message",
            json={"message": message},
            headers={"Authorization": f"Bearer {token}"},
        )

    try:
        body = response.json()
    except ValueError:
        print(f"❌ {response.status_code}: {response.text}")
        return 1

    if response.status_code != 200:
        print(f"❌ {response.status_code}: {body.get('error')}")
        return 1

    print("✓ Stored message:")
    print(json.dumps(body["data"], indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    access_token = os.getenv("ACCESS_TOKEN")
    if not access_token:
        print("ACCESS_TOKEN is not set")
        sys.exit(2)
    try:
        sys.exit(asyncio.run(submit_message(" ".join(sys.argv[1:]), access_token)))
    except KeyboardInterrupt:
        print("\n\nCancelled by user")
        sys.exit(0)
    except httpx.RequestError as e:
        print(f"\n❌ Could not reach API: {e}")
        sys.exit(1)
