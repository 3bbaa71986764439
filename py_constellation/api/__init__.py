"""HTTP API for constellation building."""
