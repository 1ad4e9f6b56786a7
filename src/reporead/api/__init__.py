"""HTTP API for the desktop UI."""
