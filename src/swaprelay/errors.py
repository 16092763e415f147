"""Named trade failures.

These are the only failures reported with a fixed error code. Anything else
raised while executing a trade is reported with its own description.
"""

from enum import Enum


class TradeErrorCode(str, Enum):
    """Error codes returned to the caller."""
    BAD_HMAC = "bad_hmac"
    BAD_BODY = "bad_body"
    QUOTE_FAILED = "quote_failed"
    SWAP_PREP_FAILED = "swap_prep_failed"


class TradeError(Exception):
    """Base class for failures with a fixed code and HTTP status."""

    code: TradeErrorCode
    status_code: int = 500

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.code.value)


class BadAuthenticationError(TradeError):
    """Request signature missing, malformed or wrong."""

    code = TradeErrorCode.BAD_HMAC
    status_code = 401


class BadRequestBodyError(TradeError):
    """Trade body is not valid JSON or misses required fields."""

    code = TradeErrorCode.BAD_BODY
    status_code = 400


class QuoteFailedError(TradeError):
    """Aggregator quote endpoint returned a non-success status."""

    code = TradeErrorCode.QUOTE_FAILED


class SwapPrepFailedError(TradeError):
    """Aggregator swap endpoint returned a non-success status."""

    code = TradeErrorCode.SWAP_PREP_FAILED
