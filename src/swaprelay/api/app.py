"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from solders.keypair import Keypair

from swaprelay import __version__
from swaprelay.broadcast import SolanaBroadcaster
from swaprelay.config import Settings, get_settings
from swaprelay.routing.base import SwapAggregator
from swaprelay.routing.jupiter import JupiterAggregator
from swaprelay.services.trade_executor import TradeExecutor
from swaprelay.signing.keys import load_keypair

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    yield
    # Shutdown
    client: Optional[httpx.AsyncClient] = app.state.http_client
    if client is not None:
        await client.aclose()


def create_app(
    settings: Optional[Settings] = None,
    keypair: Optional[Keypair] = None,
    aggregator: Optional[SwapAggregator] = None,
    broadcaster: Optional[SolanaBroadcaster] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The signing key is loaded here, so a missing or invalid key fails app
    creation instead of the first trade.

    Args:
        settings: Settings to use (defaults to environment)
        keypair: Signing keypair (defaults to the configured key)
        aggregator: Quote/swap provider (defaults to Jupiter)
        broadcaster: Transaction broadcaster (defaults to RPC_URL)

    Raises:
        KeyLoadError: If no usable signing key is configured
    """
    settings = settings or get_settings()
    keypair = keypair or load_keypair(settings)

    http_client = None
    if aggregator is None or broadcaster is None:
        http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    if aggregator is None:
        aggregator = JupiterAggregator(settings.jupiter_base, http_client)
    if broadcaster is None:
        broadcaster = SolanaBroadcaster(settings.rpc_url, http_client)

    app = FastAPI(
        title="swaprelay",
        description="Authenticated Jupiter swap signer",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.trade_executor = TradeExecutor.from_settings(
        settings, keypair, aggregator, broadcaster
    )

    # Register routes
    from swaprelay.api.routes import health, trade

    app.include_router(health.router, tags=["Health"])
    app.include_router(trade.router, tags=["Trade"])

    logger.info(f"Trade relay ready, signer {app.state.trade_executor.pubkey}")
    return app
