"""Core utilities: logging, request tracing and server state."""
