"""Content store bridge for files and pictures.

Blob bytes live in the object store and a metadata row (digest plus bucket
name) lives in the database. There is no transaction spanning both stores:

- a file row is committed first to get its id, then the blob is written;
  a failed blob write deletes the row again
- a picture blob is written first and its row inserted afterwards
- deletes remove the blob before the row; a picture blob shared by another
  row of the same item is left in place

No database transaction is held open while the object store is called.

A crash between the two writes can leave a blob nobody references, or a
file row without a blob if removing it fails too. Both cases are logged
and not cleaned up. A row whose blob is gone reads as ``NotFound``.
Concurrent read and delete of the same blob are not ordered.

Copyright (c) Bryn Gwalad 2025
"""

import hashlib
import logging
from typing import List, Tuple

from sqlmodel import select

from utils.object_store import ObjectStore

from .errors import ObjectStoreFailure, StorageUnavailable
from .models import FileInfo, PictureInfo
from .repository import FileInfoRepository, ItemRepository, PictureInfoRepository

logger = logging.getLogger(__name__)

FILES_BUCKET = "files"


def digest(content: bytes) -> str:
    """Return the SHA-256 hex digest used to address ``content``."""
    return hashlib.sha256(content).hexdigest()


def file_key(file_id: int, content_hash: str) -> str:
    return f"{file_id}-{content_hash}"


def picture_bucket(item_id: int) -> str:
    return f"item-{item_id}"


class FileStore:
    """Opaque files kept in one flat bucket keyed by ``<id>-<digest>``."""

    def __init__(self, infos: FileInfoRepository, objects: ObjectStore):
        self.infos = infos
        self.objects = objects

    def list(self) -> List[FileInfo]:
        return self.infos.list()

    def info(self, file_id: int) -> FileInfo:
        return self.infos.get(file_id)

    def insert(self, content: bytes) -> FileInfo:
        content_hash = digest(content)
        info = self.infos.create(FileInfo(hash=content_hash, object_storage_location=FILES_BUCKET))
        key = file_key(info.id, content_hash)
        try:
            self.objects.put(FILES_BUCKET, key, content)
        except ObjectStoreFailure:
            self._discard_row(info.id, key)
            raise
        logger.info("Stored file id=%s hash=%s (%d bytes)", info.id, content_hash, len(content))
        return info

    def _discard_row(self, file_id: int, key: str) -> None:
        try:
            self._delete_row(file_id)
        except StorageUnavailable:
            logger.error("Row for file id=%s kept without its blob %s/%s", file_id, FILES_BUCKET, key)

    def _delete_row(self, file_id: int) -> None:
        with self.infos.session("delete") as session:
            session.delete(self.infos.fetch(session, file_id))
            session.commit()

    def read(self, file_id: int) -> bytes:
        info = self.infos.get(file_id)
        return self.objects.get(info.object_storage_location, file_key(info.id, info.hash))

    def read_all(self) -> List[Tuple[FileInfo, bytes]]:
        return [
            (info, self.objects.get(info.object_storage_location, file_key(info.id, info.hash)))
            for info in self.infos.list()
        ]

    def delete(self, file_id: int) -> None:
        info = self.infos.get(file_id)
        self.objects.delete(info.object_storage_location, file_key(info.id, info.hash))
        self._delete_row(file_id)
        logger.info("Deleted file id=%s", file_id)


class PictureStore:
    """Item pictures, one bucket per item, keyed by the bare digest.

    Identical bytes attached to the same item twice share one blob.
    """

    def __init__(self, infos: PictureInfoRepository, items: ItemRepository, objects: ObjectStore):
        self.infos = infos
        self.items = items
        self.objects = objects

    def list(self) -> List[PictureInfo]:
        return self.infos.list()

    def info(self, picture_id: int) -> PictureInfo:
        return self.infos.get(picture_id)

    def insert(self, item_id: int, description: str, content: bytes) -> PictureInfo:
        # raises NotFound before anything is written
        self.items.get(item_id)

        content_hash = digest(content)
        bucket = picture_bucket(item_id)
        self.objects.put(bucket, content_hash, content)

        info = PictureInfo(
            item_id=item_id,
            description=description,
            hash=content_hash,
            object_storage_location=bucket,
        )
        try:
            info = self.infos.create(info)
        except StorageUnavailable:
            logger.error("Blob %s/%s written but its row was not inserted", bucket, content_hash)
            raise
        logger.info("Stored picture id=%s for item=%s hash=%s", info.id, item_id, content_hash)
        return info

    def read(self, picture_id: int) -> bytes:
        info = self.infos.get(picture_id)
        return self.objects.get(info.object_storage_location, info.hash)

    def read_all(self) -> List[Tuple[PictureInfo, bytes]]:
        return [
            (info, self.objects.get(info.object_storage_location, info.hash))
            for info in self.infos.list()
        ]

    def delete(self, picture_id: int) -> None:
        info = self.infos.get(picture_id)
        if self._shared(info):
            logger.info("Keeping blob %s/%s, other pictures use it", info.object_storage_location, info.hash)
        else:
            self.objects.delete(info.object_storage_location, info.hash)

        with self.infos.session("delete") as session:
            session.delete(self.infos.fetch(session, picture_id))
            session.commit()
        logger.info("Deleted picture id=%s", picture_id)

    def _shared(self, info: PictureInfo) -> bool:
        with self.infos.session("delete") as session:
            other = session.exec(
                select(PictureInfo.id).where(
                    PictureInfo.object_storage_location == info.object_storage_location,
                    PictureInfo.hash == info.hash,
                    PictureInfo.id != info.id,
                )
            ).first()
            return other is not None
