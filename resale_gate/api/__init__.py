"""HTTP API for listing admission."""
