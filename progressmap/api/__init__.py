"""HTTP API for the progress map."""
