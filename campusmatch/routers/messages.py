from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import models, schemas, services
from campusmatch.dependencies import get_current_active_user, get_db

router = APIRouter()


@router.get("/unread/count", response_model=schemas.UnreadCount)
async def get_unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.message_service.unread_count(db, user_id=current_user.id)


@router.post("/{match_id}", response_model=schemas.MessageSent, status_code=status.HTTP_201_CREATED)
async def send_message(
    match_id: int,
    message_in: schemas.MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.message_service.send(
        db, match_id=match_id, sender_id=current_user.id, message_in=message_in
    )


@router.get("/{match_id}", response_model=schemas.MessageList)
async def list_messages(
    match_id: int,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    A page of the conversation, newest page first. Marks the thread as read for the caller.
    """
    return await services.message_service.list_messages(
        db, match_id=match_id, user_id=current_user.id, page=page, limit=limit
    )


@router.put("/{match_id}/read", response_model=schemas.MarkReadResult)
async def mark_messages_read(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.message_service.mark_read(db, match_id=match_id, reader_id=current_user.id)


@router.delete("/message/{message_id}", response_model=schemas.ActionResponse)
async def delete_message(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.message_service.delete_message(db, message_id=message_id, user_id=current_user.id)
