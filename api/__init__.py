"""FastAPI application exposing the pitch fitter."""
