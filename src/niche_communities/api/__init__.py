"""HTTP API for the Niche Communities service."""
