"""swaprelay - HMAC-authenticated Jupiter swap signer for Solana."""

__version__ = "0.1.0"
