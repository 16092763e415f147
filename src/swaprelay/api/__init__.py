"""HTTP API for the trade relay."""
