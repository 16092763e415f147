"""Solana transaction broadcast over JSON-RPC."""

import base64
import logging
from typing import Any

import httpx
from solders.transaction import VersionedTransaction

logger = logging.getLogger(__name__)

# Attempts delegated to the RPC node; the relay has no retry loop of its own
MAX_RETRIES = 3
PREFLIGHT_COMMITMENT = "confirmed"


class BroadcastError(Exception):
    """Exception raised when the RPC node rejects a transaction."""

    def __init__(self, message: str, code: Any = None):
        self.code = code
        super().__init__(message)


class SolanaBroadcaster:
    """Submits signed transactions to a single Solana RPC endpoint."""

    def __init__(self, rpc_url: str, client: httpx.AsyncClient):
        self.rpc_url = rpc_url
        self._client = client

    async def submit(self, signed: VersionedTransaction) -> str:
        """Send a signed transaction with full preflight checks.

        Returns:
            Transaction signature assigned by the network

        Raises:
            BroadcastError: If the node returns a JSON-RPC error
            httpx.HTTPStatusError: If the node returns a non-success status
        """
        encoded = base64.b64encode(bytes(signed)).decode()

        response = await self._client.post(
            self.rpc_url,
            json={
                "jsonrpc": "2.0",
                "id": 1,
                "method": "sendTransaction",
                "params": [
                    encoded,
                    {
                        "encoding": "base64",
                        "skipPreflight": False,
                        "preflightCommitment": PREFLIGHT_COMMITMENT,
                        "maxRetries": MAX_RETRIES,
                    },
                ],
            },
        )
        response.raise_for_status()

        result = response.json()
        if "error" in result:
            error = result["error"]
            if isinstance(error, dict):
                raise BroadcastError(error.get("message", str(error)), code=error.get("code"))
            raise BroadcastError(str(error))

        txid = result.get("result")
        if not isinstance(txid, str):
            raise BroadcastError(f"Unexpected sendTransaction response: {result}")

        logger.info(f"Solana tx broadcast via {self.rpc_url}: {txid}")
        return txid
