"""Application configuration using pydantic-settings.

All values come from environment variables (or a local .env file).
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Wrapped SOL mint, the base asset every trade spends
WSOL_MINT = "So11111111111111111111111111111111111111112"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Request authentication
    # ======================
    hmac_secret: str = Field(
        default="", description="Shared HMAC secret (empty = every trade rejected)"
    )

    # ======================
    # Signing key
    # ======================
    trader_secret_base58: str = Field(
        default="", description="Signing key as base58 (takes priority over JSON)"
    )
    trader_secret_json: str = Field(
        default="", description="Signing key as a JSON array of byte values"
    )

    # ======================
    # Solana / Jupiter
    # ======================
    rpc_url: str = Field(
        default="https://api.devnet.solana.com", description="Solana RPC URL"
    )
    jupiter_base: str = Field(
        default="https://quote-api.jup.ag", description="Jupiter aggregator base URL"
    )
    input_mint: str = Field(default=WSOL_MINT, description="Mint spent by every trade")
    slippage_bps: int = Field(default=50, ge=0, le=10000, description="Quote slippage (bps)")
    prioritization_fee_lamports: Optional[int] = Field(
        default=None, ge=0, description="Priority fee passed to Jupiter (unset = omitted)"
    )

    # ======================
    # Outbound HTTP
    # ======================
    http_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout for aggregator and RPC calls"
    )

    # ======================
    # Signing concurrency
    # ======================
    serialize_signing: bool = Field(
        default=False, description="Serialize quote-to-broadcast per signing key"
    )
    signing_lock_timeout_seconds: float = Field(
        default=60.0, gt=0, description="Max wait for the signing lock"
    )

    # ======================
    # API
    # ======================
    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8080, description="API server port")
    debug: bool = Field(default=False, description="Enable debug logging")
    cors_origins: str = Field(default="*", description="Comma-separated CORS origins")
    max_body_bytes: int = Field(
        default=1_048_576, gt=0, description="Largest accepted /trade body (bytes)"
    )

    @field_validator("prioritization_fee_lamports", mode="before")
    @classmethod
    def empty_fee_is_unset(cls, v):
        """Treat an empty PRIORITIZATION_FEE_LAMPORTS as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def allowed_origins(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "debug": self.debug,
            "host": self.host,
            "port": self.port,
            "hmac_secret": "***" if self.hmac_secret else "(not set)",
            "signing_key": {
                "base58": "***" if self.trader_secret_base58 else "(not set)",
                "json": "***" if self.trader_secret_json else "(not set)",
            },
            "rpc_url": self.rpc_url,
            "jupiter": {
                "base": self.jupiter_base,
                "input_mint": self.input_mint,
                "slippage_bps": self.slippage_bps,
                "prioritization_fee_lamports": self.prioritization_fee_lamports,
            },
            "http_timeout_seconds": self.http_timeout_seconds,
            "serialize_signing": self.serialize_signing,
            "cors_origins": self.allowed_origins,
            "max_body_bytes": self.max_body_bytes,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
