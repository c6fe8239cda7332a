import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import crud, models, schemas
from campusmatch.core.config import settings
from campusmatch.core.errors import (
    AccessDeniedError, InactiveMatchError, NotFoundError, ValidationError
)
from campusmatch.db.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)


async def _get_participant_match(
    db: AsyncSession, *, match_id: int, user_id: int, for_update: bool = False
) -> models.Match:
    match = await crud.crud_match.get_match_by_id(db, match_id=match_id, for_update=for_update)
    if match is None:
        raise NotFoundError("Match not found.")
    if not match.has_participant(user_id):
        logger.warning(f"User {user_id} denied access to match {match_id}")
        raise AccessDeniedError("Access denied to this match.")
    return match


def _clean_content(content: Optional[str]) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Message content is required.")
    if len(content) > settings.MESSAGE_MAX_LENGTH:
        raise ValidationError(f"Message cannot exceed {settings.MESSAGE_MAX_LENGTH} characters.")
    return content


async def send(
    db: AsyncSession, *, match_id: int, sender_id: int, message_in: schemas.MessageCreate
) -> schemas.MessageSent:
    """
    Appends a message to the thread of an active match.

    The message is delivered at once, and the match's last-message pointer
    moves to it in the same transaction.
    """
    content = _clean_content(message_in.content)

    async def work() -> models.Message:
        match = await _get_participant_match(db, match_id=match_id, user_id=sender_id, for_update=True)
        if not match.is_active:
            raise InactiveMatchError("Cannot send message to inactive match.")
        message = await crud.message.create_delivered(
            db,
            obj_in=message_in.model_copy(update={"content": content}),
            match_id=match.id,
            sender_id=sender_id,
            receiver_id=match.other_user_id(sender_id),
        )
        match.last_message_id = message.id
        match.last_message_at = message.created_at
        await db.flush()
        return message

    message = await run_in_transaction(db, work, operation=f"send message in match {match_id}")
    logger.info(f"User {sender_id} sent message {message.id} in match {match_id}")
    return schemas.MessageSent(message=schemas.MessageRead.model_validate(message))


async def mark_read(db: AsyncSession, *, match_id: int, reader_id: int) -> schemas.MarkReadResult:
    async def work() -> int:
        await _get_participant_match(db, match_id=match_id, user_id=reader_id)
        return await crud.message.mark_read(db, match_id=match_id, receiver_id=reader_id)

    modified = await run_in_transaction(db, work, operation=f"mark messages read in match {match_id}")
    return schemas.MarkReadResult(modified_count=modified)


async def list_messages(
    db: AsyncSession, *, match_id: int, user_id: int, page: int = 1, limit: Optional[int] = None
) -> schemas.MessageList:
    """
    One page of the thread, oldest first within the page.

    Page 1 holds the newest messages. Viewing the thread marks everything the
    viewer received in it as read, before the page is fetched.
    """
    limit = limit or settings.MESSAGES_PAGE_SIZE
    if page < 1 or limit < 1:
        raise ValidationError("Page and limit must be 1 or greater.")

    await mark_read(db, match_id=match_id, reader_id=user_id)
    messages = await crud.message.get_page_for_match(
        db, match_id=match_id, skip=(page - 1) * limit, limit=limit
    )
    items = [schemas.MessageRead.model_validate(message) for message in messages]
    return schemas.MessageList(messages=items, count=len(items), page=page, limit=limit)


async def unread_count(db: AsyncSession, *, user_id: int) -> schemas.UnreadCount:
    count = await crud.message.count_unread(db, receiver_id=user_id)
    return schemas.UnreadCount(unread_count=count)


async def delete_message(db: AsyncSession, *, message_id: int, user_id: int) -> schemas.ActionResponse:
    """Deletes one of the user's own messages and repoints the match's last message."""
    async def work() -> None:
        message = await crud.message.get(db, id=message_id)
        if message is None:
            raise NotFoundError("Message not found.")
        if message.sender_id != user_id:
            raise AccessDeniedError("You can only delete your own messages.")
        match = await crud.crud_match.get_match_by_id(db, match_id=message.match_id, for_update=True)
        await crud.message.remove(db, db_obj=message)
        if match is not None and match.last_message_id == message_id:
            latest = await crud.message.get_latest_for_match(db, match_id=match.id)
            match.last_message_id = latest.id if latest else None
            match.last_message_at = latest.created_at if latest else match.matched_at
            await db.flush()

    await run_in_transaction(db, work, operation=f"delete message {message_id}")
    logger.info(f"User {user_id} deleted message {message_id}")
    return schemas.ActionResponse(message="Message deleted successfully")
