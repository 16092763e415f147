"""Tests for the Jupiter client and the RPC broadcaster."""

import base64
import json

import httpx
import pytest

from swaprelay.broadcast import BroadcastError, SolanaBroadcaster
from swaprelay.errors import QuoteFailedError, SwapPrepFailedError
from swaprelay.routing.base import AggregatorError, UnsignedSwap
from swaprelay.routing.jupiter import JupiterAggregator
from swaprelay.signing.local import TransactionSigner

from helpers import FIXED_QUOTE, TEST_MINT

WSOL = "So11111111111111111111111111111111111111112"


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


def make_jupiter(recorder: Recorder) -> JupiterAggregator:
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return JupiterAggregator("https://jup.test/", client)


class TestJupiterQuote:
    """Tests for the quote call."""

    @pytest.mark.asyncio
    async def test_quote_request(self):
        """Quote is a single GET with the trade encoded as query parameters."""
        recorder = Recorder(payload=FIXED_QUOTE)
        jupiter = make_jupiter(recorder)

        quote = await jupiter.get_quote(WSOL, TEST_MINT, 10_000_000, 50)

        assert quote == FIXED_QUOTE
        assert len(recorder.requests) == 1
        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/v6/quote"
        assert dict(request.url.params) == {
            "inputMint": WSOL,
            "outputMint": TEST_MINT,
            "amount": "10000000",
            "slippageBps": "50",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
    async def test_quote_failure_not_retried(self, status):
        """Non-success status raises QuoteFailedError after one attempt."""
        recorder = Recorder(status_code=status, payload={"error": "no route"})
        jupiter = make_jupiter(recorder)

        with pytest.raises(QuoteFailedError):
            await jupiter.get_quote(WSOL, TEST_MINT, 1, 50)

        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_no_caching(self):
        """Every quote call reaches the aggregator."""
        recorder = Recorder(payload=FIXED_QUOTE)
        jupiter = make_jupiter(recorder)

        await jupiter.get_quote(WSOL, TEST_MINT, 1, 50)
        await jupiter.get_quote(WSOL, TEST_MINT, 1, 50)

        assert len(recorder.requests) == 2


class TestJupiterSwap:
    """Tests for the swap-build call."""

    @pytest.mark.asyncio
    async def test_swap_request_without_priority_fee(self):
        """Unset priority fee is omitted from the payload entirely."""
        recorder = Recorder(payload={"swapTransaction": "AQID", "lastValidBlockHeight": 123})
        jupiter = make_jupiter(recorder)

        unsigned = await jupiter.build_swap(FIXED_QUOTE, "UserPubkey111")

        assert unsigned == UnsignedSwap(swap_transaction="AQID")
        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v6/swap"
        assert json.loads(request.content) == {
            "quoteResponse": FIXED_QUOTE,
            "userPublicKey": "UserPubkey111",
            "wrapAndUnwrapSol": True,
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fee", [0, 5000])
    async def test_swap_request_with_priority_fee(self, fee):
        """A configured priority fee is sent as an integer, zero included."""
        recorder = Recorder(payload={"swapTransaction": "AQID"})
        jupiter = make_jupiter(recorder)

        await jupiter.build_swap(FIXED_QUOTE, "UserPubkey111", prioritization_fee_lamports=fee)

        payload = json.loads(recorder.requests[0].content)
        assert payload["prioritizationFeeLamports"] == fee
        assert isinstance(payload["prioritizationFeeLamports"], int)

    @pytest.mark.asyncio
    async def test_swap_failure(self):
        """Non-success status raises SwapPrepFailedError."""
        jupiter = make_jupiter(Recorder(status_code=422, payload={"error": "bad quote"}))

        with pytest.raises(SwapPrepFailedError):
            await jupiter.build_swap(FIXED_QUOTE, "UserPubkey111")

    @pytest.mark.asyncio
    async def test_swap_missing_transaction(self):
        """A success response without a transaction is an AggregatorError."""
        jupiter = make_jupiter(Recorder(payload={"lastValidBlockHeight": 1}))

        with pytest.raises(AggregatorError):
            await jupiter.build_swap(FIXED_QUOTE, "UserPubkey111")


class TestSolanaBroadcaster:
    """Tests for sendTransaction."""

    @pytest.fixture
    def signed(self, keypair, unsigned_tx):
        return TransactionSigner(keypair).sign(UnsignedSwap(swap_transaction=unsigned_tx))

    @pytest.mark.asyncio
    async def test_submit(self, signed):
        """Signed bytes are sent with preflight on and three node retries."""
        recorder = Recorder(payload={"jsonrpc": "2.0", "id": 1, "result": "5sigABC"})
        client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        broadcaster = SolanaBroadcaster("https://rpc.test", client)

        txid = await broadcaster.submit(signed)

        assert txid == "5sigABC"
        body = json.loads(recorder.requests[0].content)
        assert body["method"] == "sendTransaction"
        encoded, options = body["params"]
        assert encoded == base64.b64encode(bytes(signed)).decode()
        assert options == {
            "encoding": "base64",
            "skipPreflight": False,
            "preflightCommitment": "confirmed",
            "maxRetries": 3,
        }

    @pytest.mark.asyncio
    async def test_rpc_error(self, signed):
        """A JSON-RPC error is raised as BroadcastError with the node's message."""
        recorder = Recorder(payload={
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32002, "message": "Transaction simulation failed"},
        })
        client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))

        with pytest.raises(BroadcastError) as exc_info:
            await SolanaBroadcaster("https://rpc.test", client).submit(signed)

        assert str(exc_info.value) == "Transaction simulation failed"
        assert exc_info.value.code == -32002
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_http_error(self, signed):
        """Non-success HTTP status propagates as httpx.HTTPStatusError."""
        client = httpx.AsyncClient(transport=httpx.MockTransport(Recorder(status_code=502)))

        with pytest.raises(httpx.HTTPStatusError):
            await SolanaBroadcaster("https://rpc.test", client).submit(signed)
