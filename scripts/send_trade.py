#!/usr/bin/env python3
"""Send a signed trade request to a running relay.

Usage:
    HMAC_SECRET=... python scripts/send_trade.py <mint_out> <amount_sol> [--url URL]

The body is serialized once and the exact same bytes are signed and sent.
"""

import argparse
import asyncio
import json
import os
import sys
import time

import httpx

from swaprelay.auth import compute_request_signature


def build_signed_request(mint_out: str, amount_sol: float, secret: str) -> tuple[bytes, dict]:
    """Serialize a trade body and compute its authentication headers."""
    body = json.dumps({"mintOut": mint_out, "amountSol": amount_sol}, separators=(",", ":")).encode()
    timestamp = str(int(time.time() * 1000))
    headers = {
        "Content-Type": "application/json",
        "X-Timestamp": timestamp,
        "X-Sign": compute_request_signature(body, timestamp, secret),
    }
    return body, headers


async def send_trade(url: str, mint_out: str, amount_sol: float, secret: str) -> int:
    body, headers = build_signed_request(mint_out, amount_sol, secret)

    async with httpx.AsyncClient(timeout=60.0) as client:
        response = await client.post(f"{url.rstrip('/')}/trade", content=body, headers=headers)

    print(f"HTTP {response.status_code}")
    print(json.dumps(response.json(), indent=2))
    return 0 if response.is_success else 1


def main():
    parser = argparse.ArgumentParser(description="Send a signed trade to swaprelay")
    parser.add_argument("mint_out", help="Mint address to buy")
    parser.add_argument("amount_sol", type=float, help="Amount of SOL to spend")
    parser.add_argument("--url", default="http://localhost:8080", help="Relay base URL")
    args = parser.parse_args()

    secret = os.environ.get("HMAC_SECRET")
    if not secret:
        print("HMAC_SECRET is not set", file=sys.stderr)
        sys.exit(2)

    sys.exit(asyncio.run(send_trade(args.url, args.mint_out, args.amount_sol, secret)))


if __name__ == "__main__":
    main()
