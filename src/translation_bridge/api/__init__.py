"""HTTP surface: FastAPI app factory, request models, checks and routes."""
