"""
FastAPI dependencies.
"""
from fastapi import Request

from fintrack.storage import StorageInterface


def get_storage(request: Request) -> StorageInterface:
    """The storage instance the app was composed with."""
    return request.app.state.storage
