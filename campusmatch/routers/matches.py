from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import models, schemas, services
from campusmatch.dependencies import get_current_active_user, get_db

router = APIRouter()


@router.post("/like/{user_id}", response_model=schemas.LikeResult)
async def like_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    Like a user. When the like is mutual the response carries the new match.
    """
    return await services.match_service.like(db, actor_id=current_user.id, target_id=user_id)


@router.post("/dislike/{user_id}", response_model=schemas.ActionResponse)
async def dislike_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.match_service.dislike(db, actor_id=current_user.id, target_id=user_id)


@router.post("/undo/{user_id}", response_model=schemas.ActionResponse)
async def undo_action(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    Forget the current user's like or dislike of a user. An existing match is retired.
    """
    return await services.match_service.undo(db, actor_id=current_user.id, target_id=user_id)


@router.get("", response_model=schemas.MatchList)
async def list_matches(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    Active matches of the current user, most recent conversation first.
    """
    return await services.match_service.list_matches(db, user_id=current_user.id)


@router.get("/{match_id}", response_model=schemas.MatchDetail)
async def read_match(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.match_service.get_match(db, match_id=match_id, user_id=current_user.id)


@router.delete("/{match_id}", response_model=schemas.ActionResponse)
async def unmatch(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.match_service.unmatch(db, match_id=match_id, requester_id=current_user.id)
