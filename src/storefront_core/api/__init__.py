"""HTTP API for the storefront core."""
