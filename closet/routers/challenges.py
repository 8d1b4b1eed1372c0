from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from closet.auth.deps import get_current_user_id
from closet.core.db import get_session
from closet.core.errors import ChallengeNotFound, InvalidChallengeItem
from closet.core.state import get_event_sink
from closet.core.timeutil import as_utc, utcnow
from closet.events.providers import EventSink
from closet.schemas.challenges import ChallengeCreateOut, ChallengeOut
from closet.schemas.items import item_out
from closet.services.anti_consumption import RediscoveryChallengeService
from closet.services.anti_consumption.challenges import ChallengeView

router = APIRouter(prefix="/challenges", tags=["challenges"])


def get_challenge_service(events: EventSink = Depends(get_event_sink)) -> RediscoveryChallengeService:
    return RediscoveryChallengeService(events)


def _challenge_out(view: ChallengeView) -> ChallengeOut:
    c = view.challenge
    remaining = as_utc(c.expires_at) - utcnow()
    return ChallengeOut(
        id=str(c.id),
        challenge_type=c.challenge_type,
        title=c.title,
        description=c.description,
        reward=c.reward,
        target_items=[item_out(i) for i in view.target_items],
        confirmed_item_ids=list(c.confirmed_item_ids or []),
        progress=c.progress,
        total_items=c.total_items,
        status=view.status,
        days_remaining=max(0, remaining.days),
        expires_at=c.expires_at,
        completed_at=c.completed_at,
        created_at=c.created_at,
    )


@router.post("", response_model=ChallengeCreateOut)
async def create_challenge(
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    service: RediscoveryChallengeService = Depends(get_challenge_service),
):
    view = await service.create(session, user_id)
    if view is None:
        return ChallengeCreateOut(challenge=None, message="no_neglected_items")
    return ChallengeCreateOut(challenge=_challenge_out(view))


@router.get("/active", response_model=ChallengeCreateOut)
async def active_challenge(
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    service: RediscoveryChallengeService = Depends(get_challenge_service),
):
    view = await service.get_active(session, user_id)
    return ChallengeCreateOut(challenge=_challenge_out(view) if view else None)


@router.get("", response_model=list[ChallengeOut])
async def list_challenges(
    limit: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    service: RediscoveryChallengeService = Depends(get_challenge_service),
):
    views = await service.list_challenges(session, user_id, limit=limit)
    return [_challenge_out(v) for v in views]


@router.get("/{challenge_id}", response_model=ChallengeOut)
async def get_challenge(
    challenge_id: UUID,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    service: RediscoveryChallengeService = Depends(get_challenge_service),
):
    try:
        view = await service.get(session, user_id, challenge_id)
    except ChallengeNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    return _challenge_out(view)


@router.post("/{challenge_id}/items/{item_id}/worn", response_model=ChallengeOut)
async def mark_item_worn(
    challenge_id: UUID,
    item_id: UUID,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
    service: RediscoveryChallengeService = Depends(get_challenge_service),
):
    try:
        view = await service.mark_item_worn(session, user_id, challenge_id, item_id)
    except ChallengeNotFound as e:
        raise HTTPException(status_code=404, detail=e.code) from e
    except InvalidChallengeItem as e:
        raise HTTPException(status_code=400, detail=e.code) from e
    return _challenge_out(view)
