from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from closet.auth.deps import get_current_user_id
from closet.core.db import get_session
from closet.core.errors import ItemNotFound
from closet.schemas.items import ItemCreate, ItemOut, ItemUpdate, ItemWearLogIn, item_out
from closet.services.wardrobe import WardrobeRepository

router = APIRouter(prefix="/items", tags=["items"])


def get_wardrobe() -> WardrobeRepository:
    return WardrobeRepository()


@router.post("", response_model=ItemOut)
async def create_item(
    payload: ItemCreate,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    wardrobe: WardrobeRepository = Depends(get_wardrobe),
):
    try:
        item = await wardrobe.create_item(session, user_id, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return item_out(item)


@router.get("", response_model=list[ItemOut])
async def list_items(
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    wardrobe: WardrobeRepository = Depends(get_wardrobe),
):
    items = await wardrobe.get_wardrobe_items(session, user_id)
    return [item_out(i) for i in items]


@router.get("/{item_id}", response_model=ItemOut)
async def get_item(
    item_id: UUID,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    wardrobe: WardrobeRepository = Depends(get_wardrobe),
):
    try:
        item = await wardrobe.get_item(session, user_id, item_id)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    return item_out(item)


@router.patch("/{item_id}", response_model=ItemOut)
async def update_item(
    item_id: UUID,
    payload: ItemUpdate,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    wardrobe: WardrobeRepository = Depends(get_wardrobe),
):
    data = payload.model_dump(exclude_unset=True)
    try:
        item = await wardrobe.update_item(session, user_id, item_id, data)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return item_out(item)


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: UUID,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    wardrobe: WardrobeRepository = Depends(get_wardrobe),
):
    try:
        await wardrobe.delete_item(session, user_id, item_id)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    return None


@router.post("/{item_id}/wear-log", response_model=ItemOut)
async def log_item_wear(
    item_id: UUID,
    payload: ItemWearLogIn,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    wardrobe: WardrobeRepository = Depends(get_wardrobe),
):
    try:
        item = await wardrobe.log_wear(session, user_id, item_id, payload.worn_date)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    return item_out(item)
