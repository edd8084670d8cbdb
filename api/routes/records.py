"""CRUD endpoints for items, locations and categories.

The three resources share one shape, so their routers are built by
``crud_router`` from the table model, its payload types and the name of the
repository on ``app.state``.
"""

from typing import List, Type

from fastapi import APIRouter, Request
from sqlmodel import SQLModel

from ..models import (
    Category,
    CategoryUpdate,
    Item,
    ItemUpdate,
    Location,
    LocationUpdate,
    NewCategory,
    NewItem,
    NewLocation,
)
from ..repository import CrudRepository


def crud_router(
    path: str,
    model: Type[SQLModel],
    new_model: Type[SQLModel],
    update_model: Type[SQLModel],
    state_attr: str,
) -> APIRouter:
    router = APIRouter(prefix=path, tags=[path.strip("/")])

    def repository(request: Request) -> CrudRepository:
        return getattr(request.app.state, state_attr)

    @router.get("", response_model=List[model])
    def list_records(request: Request):
        return repository(request).list()

    @router.get("/{record_id}", response_model=model)
    def get_record(record_id: int, request: Request):
        return repository(request).get(record_id)

    @router.post("", response_model=model)
    def add_record(payload: new_model, request: Request):
        return repository(request).create(payload)

    @router.put("", response_model=model)
    def update_record(payload: update_model, request: Request):
        return repository(request).update(payload)

    @router.delete("/{record_id}")
    def delete_record(record_id: int, request: Request):
        repository(request).delete(record_id)
        return {"ok": True}

    return router


items_router = crud_router("/items", Item, NewItem, ItemUpdate, "items")
locations_router = crud_router("/locations", Location, NewLocation, LocationUpdate, "locations")
categories_router = crud_router("/categories", Category, NewCategory, CategoryUpdate, "categories")
