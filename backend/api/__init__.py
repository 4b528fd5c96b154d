"""
Planet Calm API package.

Provides the FastAPI application for the Planet Calm pet map. The
application object lives in ``api.app`` (``api.app:app`` for uvicorn).
"""
