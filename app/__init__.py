"""FastAPI service exposing a shared reading tree."""
