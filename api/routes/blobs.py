"""Endpoints for raw file and picture content.

Uploads are the raw request body. Reads return the stored bytes as
``application/octet-stream``. The bridge calls block on the database and
the object store, so the async handlers run them in a worker thread.
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, Query, Request, Response

from ..content import FileStore, PictureStore
from ..deps import get_file_store, get_picture_store
from ..models import FileInfo, PictureInfo

router = APIRouter(tags=["content"])

OCTET_STREAM = "application/octet-stream"


@router.get("/files/{file_id}")
async def get_file(file_id: int, files: FileStore = Depends(get_file_store)):
    content = await asyncio.to_thread(files.read, file_id)
    return Response(content=content, media_type=OCTET_STREAM)


@router.post("/files", response_model=FileInfo)
async def add_file(request: Request, files: FileStore = Depends(get_file_store)):
    body = await request.body()
    return await asyncio.to_thread(files.insert, body)


@router.delete("/files/{file_id}")
async def delete_file(file_id: int, files: FileStore = Depends(get_file_store)):
    await asyncio.to_thread(files.delete, file_id)
    return {"ok": True}


@router.get("/file_infos", response_model=List[FileInfo])
def list_file_infos(files: FileStore = Depends(get_file_store)):
    return files.list()


@router.get("/pictures", response_model=List[PictureInfo])
def list_pictures(pictures: PictureStore = Depends(get_picture_store)):
    return pictures.list()


@router.get("/pictures/{picture_id}")
async def get_picture(picture_id: int, pictures: PictureStore = Depends(get_picture_store)):
    content = await asyncio.to_thread(pictures.read, picture_id)
    return Response(content=content, media_type=OCTET_STREAM)


@router.post("/pictures", response_model=PictureInfo)
async def add_picture(
    request: Request,
    item_id: int = Query(...),
    description: str = Query(""),
    pictures: PictureStore = Depends(get_picture_store),
):
    body = await request.body()
    return await asyncio.to_thread(pictures.insert, item_id, description, body)


@router.delete("/pictures/{picture_id}")
async def delete_picture(picture_id: int, pictures: PictureStore = Depends(get_picture_store)):
    await asyncio.to_thread(pictures.delete, picture_id)
    return {"ok": True}
