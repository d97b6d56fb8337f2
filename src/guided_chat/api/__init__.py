"""Superfície HTTP (FastAPI) sobre o ChatService."""
