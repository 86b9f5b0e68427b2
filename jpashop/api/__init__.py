"""HTTP API: FastAPI application, middleware and routes."""
