"""HTTP API for Event Calendar."""
