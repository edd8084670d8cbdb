"""FastAPI dependencies resolving the shared repositories and stores.

Everything is created once by ``api.main.create_app`` and kept on
``app.state``.
"""

from fastapi import Request

from .content import FileStore, PictureStore
from .repository import GifterRepository


def get_file_store(request: Request) -> FileStore:
    return request.app.state.files


def get_picture_store(request: Request) -> PictureStore:
    return request.app.state.pictures


def get_gifters(request: Request) -> GifterRepository:
    return request.app.state.gifters
