"""Data models for the Inventory API.

This module defines the SQLModel tables used by the API (Item, Location,
Category, Gifter, FileInfo and PictureInfo) together with the request
payloads used to create and update them. Create payloads never carry an
``id``; the database assigns it on insert.

Copyright (c) Bryn Gwalad 2025
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timestamp stored in UTC and always loaded back timezone-aware.

    SQLite keeps no offset, so values are converted to UTC on the way in and
    tagged as UTC on the way out. Naive input is taken to be UTC already.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return _as_utc(value)

    def process_result_value(self, value, dialect):
        return _as_utc(value)


class ItemBase(SQLModel):
    name: str
    description: str
    date_origin: datetime = Field(sa_type=UTCDateTime)


class Item(ItemBase, table=True):
    """An inventory item.

    Attributes:
        id: primary key
        name: item name
        description: free-text description
        date_origin: when the item was made or first acquired
    """

    __tablename__ = "items"

    id: Optional[int] = Field(default=None, primary_key=True)


class NewItem(ItemBase):
    pass


class ItemUpdate(ItemBase):
    id: int


class LocationBase(SQLModel):
    name: str
    description: str


class Location(LocationBase, table=True):
    """Where an item is kept."""

    __tablename__ = "locations"

    id: Optional[int] = Field(default=None, primary_key=True)


class NewLocation(LocationBase):
    pass


class LocationUpdate(LocationBase):
    id: int


class CategoryBase(SQLModel):
    name: str
    description: str


class Category(CategoryBase, table=True):
    """A category for grouping items."""

    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)


class NewCategory(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    id: int


class GifterBase(SQLModel):
    firstname: str
    lastname: str
    notes: str = ""


class Gifter(GifterBase, table=True):
    """The person an item came from.

    Gifters are recorded once and never edited or removed.
    """

    __tablename__ = "gifters"

    id: Optional[int] = Field(default=None, primary_key=True)
    date_added: datetime = Field(default_factory=_utcnow, sa_type=UTCDateTime)


class NewGifter(GifterBase):
    date_added: datetime = Field(default_factory=_utcnow)


class FileInfo(SQLModel, table=True):
    """Pointer to a blob in the ``files`` bucket.

    Attributes:
        id: primary key, also part of the object key
        hash: SHA-256 hex digest of the stored bytes
        object_storage_location: name of the bucket holding the blob
    """

    __tablename__ = "files"

    id: Optional[int] = Field(default=None, primary_key=True)
    hash: str = Field(index=True)
    object_storage_location: str


class PictureInfo(SQLModel, table=True):
    """Pointer to an image of a single item.

    Pictures live in a bucket per item (``item-<item_id>``) keyed by the
    bare digest.
    """

    __tablename__ = "pictures"

    id: Optional[int] = Field(default=None, primary_key=True)
    item_id: int = Field(foreign_key="items.id", index=True)
    description: str
    hash: str
    object_storage_location: str
