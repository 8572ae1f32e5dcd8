"""FastAPI server exposing slip generation."""

from src.server.app import create_app

__all__ = ["create_app"]
