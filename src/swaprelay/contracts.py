"""Trade request contract and unit conversion."""

import json
import math
from decimal import ROUND_FLOOR, Decimal, DecimalException, localcontext
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LAMPORTS_PER_SOL = 1_000_000_000

# Token amounts are u64 on chain
MAX_LAMPORTS = 2**64 - 1
MAX_AMOUNT_SOL = Decimal(MAX_LAMPORTS).scaleb(-9)


def sol_to_lamports(amount_sol: Union[Decimal, float, int]) -> int:
    """Convert SOL to lamports, rounding down.

    Floats go through their shortest repr so 1.5 is exactly 1500000000 and
    0.000000001 is exactly 1.
    """
    if isinstance(amount_sol, float):
        amount_sol = Decimal(repr(amount_sol))
    amount = Decimal(amount_sol)

    # Enough precision that the multiplication itself never rounds
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + 10)
        lamports = (amount * LAMPORTS_PER_SOL).to_integral_value(rounding=ROUND_FLOOR)
    return int(lamports)


class TradeRequest(BaseModel):
    """Body of POST /trade."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    mint_out: str = Field(..., alias="mintOut", min_length=1, description="Mint to buy")
    amount_sol: Decimal = Field(
        ..., alias="amountSol", gt=0, allow_inf_nan=False, description="SOL to spend"
    )

    @field_validator("mint_out", mode="before")
    @classmethod
    def validate_mint_out(cls, v):
        """Require a non-blank string."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("mintOut must be a non-empty string")
        return v

    @field_validator("amount_sol", mode="before")
    @classmethod
    def validate_amount_is_number(cls, v):
        """Require a JSON number (no strings, no booleans)."""
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
            raise ValueError("amountSol must be a number")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("amountSol must be finite")
        return v

    @model_validator(mode="after")
    def validate_lamport_range(self) -> "TradeRequest":
        """Reject amounts outside 1..MAX_LAMPORTS once converted."""
        if self.amount_sol > MAX_AMOUNT_SOL:
            raise ValueError("amountSol exceeds the largest token amount")
        try:
            lamports = self.lamports
        except DecimalException as e:
            raise ValueError("amountSol is out of range") from e
        if lamports < 1:
            raise ValueError("amountSol is smaller than one lamport")
        return self

    @property
    def lamports(self) -> int:
        """Amount to spend in lamports."""
        return sol_to_lamports(self.amount_sol)

    @classmethod
    def from_body(cls, raw_body: bytes) -> "TradeRequest":
        """Parse a raw JSON body.

        Numbers are parsed as Decimal so the amount keeps the caller's exact
        digits.

        Raises:
            ValueError: If the body is not JSON or fails validation
        """
        try:
            data = json.loads(raw_body, parse_float=Decimal)
        except RecursionError as e:
            raise ValueError("body is nested too deeply") from e
        return cls.model_validate(data)
