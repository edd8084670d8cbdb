"""Gifter endpoints. Gifters are append-only: no update or delete."""

from typing import List

from fastapi import APIRouter, Depends

from ..deps import get_gifters
from ..models import Gifter, NewGifter
from ..repository import GifterRepository

router = APIRouter(prefix="/gifters", tags=["gifters"])


@router.get("", response_model=List[Gifter])
def list_gifters(gifters: GifterRepository = Depends(get_gifters)):
    return gifters.list()


@router.get("/{gifter_id}", response_model=Gifter)
def get_gifter(gifter_id: int, gifters: GifterRepository = Depends(get_gifters)):
    return gifters.get(gifter_id)


@router.post("", response_model=Gifter)
def add_gifter(payload: NewGifter, gifters: GifterRepository = Depends(get_gifters)):
    return gifters.create(payload)
