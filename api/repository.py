"""Repositories mapping the inventory tables to SQLModel records.

``Repository`` implements list/get/create over one table and
``CrudRepository`` adds update and delete. The per-entity classes at the
bottom only bind a table model and its payload types.

Every call is a direct round trip to the database: nothing is cached and
updates are last-writer-wins.

Copyright (c) Bryn Gwalad 2025
"""

from contextlib import contextmanager
from typing import Generic, Iterator, List, Type, TypeVar

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from utils.database import get_session

from .errors import NotFound, StorageUnavailable
from .models import Category, FileInfo, Gifter, Item, Location, PictureInfo

ModelT = TypeVar("ModelT", bound=SQLModel)


class Repository(Generic[ModelT]):
    """Read and insert rows of a single table."""

    model: Type[ModelT]

    def __init__(self, engine: Engine):
        self.engine = engine

    @property
    def table(self) -> str:
        return self.model.__tablename__

    @contextmanager
    def session(self, operation: str) -> Iterator[Session]:
        """Open a session, reporting database errors as ``StorageUnavailable``."""
        try:
            with get_session(self.engine) as session:
                yield session
        except SQLAlchemyError as exc:
            raise StorageUnavailable(f"{operation} {self.table} failed: {exc}") from exc

    def list(self) -> List[ModelT]:
        with self.session("list") as session:
            return list(session.exec(select(self.model)).all())

    def get(self, record_id: int) -> ModelT:
        with self.session("get") as session:
            return self.fetch(session, record_id)

    def create(self, payload: SQLModel) -> ModelT:
        record = self.model.model_validate(payload)
        with self.session("insert") as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def fetch(self, session: Session, record_id: int) -> ModelT:
        record = session.get(self.model, record_id)
        if record is None:
            raise NotFound(f"{self.table} {record_id} not found")
        return record


class CrudRepository(Repository[ModelT]):
    """Adds in-place update and delete by id."""

    def update(self, payload: SQLModel) -> ModelT:
        """Replace every mutable field of the row with ``payload.id``."""
        with self.session("update") as session:
            record = self.fetch(session, payload.id)
            for field, value in payload.model_dump(exclude={"id"}).items():
                setattr(record, field, value)
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def delete(self, record_id: int) -> None:
        with self.session("delete") as session:
            record = self.fetch(session, record_id)
            session.delete(record)
            session.commit()


class ItemRepository(CrudRepository[Item]):
    model = Item


class LocationRepository(CrudRepository[Location]):
    model = Location


class CategoryRepository(CrudRepository[Category]):
    model = Category


class GifterRepository(Repository[Gifter]):
    model = Gifter


class FileInfoRepository(Repository[FileInfo]):
    model = FileInfo


class PictureInfoRepository(Repository[PictureInfo]):
    model = PictureInfo
