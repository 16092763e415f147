"""Trade endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse

from swaprelay.errors import BadRequestBodyError
from swaprelay.services.trade_executor import TradeExecutor, TradeResult, TradeState

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_limited_body(request: Request, limit: int) -> Optional[bytes]:
    """Read the request body, giving up once it exceeds `limit` bytes.

    Returns:
        The body, or None if it is larger than the limit
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        return None

    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/trade")
async def trade(
    request: Request,
    x_timestamp: Optional[str] = Header(None),
    x_sign: Optional[str] = Header(None),
) -> JSONResponse:
    """Swap `amountSol` SOL for `mintOut` with the relay key.

    The body is read raw: the HMAC in X-Sign covers the exact bytes sent,
    followed by the X-Timestamp value. Bodies over MAX_BODY_BYTES are
    rejected as bad_body before authentication.
    """
    executor: TradeExecutor = request.app.state.trade_executor
    limit = request.app.state.settings.max_body_bytes

    raw_body = await read_limited_body(request, limit)
    if raw_body is None:
        error = BadRequestBodyError(f"body exceeds {limit} bytes")
        logger.warning(f"Trade rejected: {error.detail}")
        result = TradeResult.failed(error.code.value, error.status_code, TradeState.UNAUTHENTICATED)
    else:
        result = await executor.execute(raw_body, x_timestamp, x_sign)

    return JSONResponse(status_code=result.status_code, content=result.to_dict())
