"""HTTP layer (FastAPI) exposing the begin and callback endpoints."""
