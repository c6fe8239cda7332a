"""Like / dislike / undo / unmatch and the match transition.

The swipe tables, the ``matches`` rows and the per-user ``match_entries``
are written only from here. Every operation that touches more than one of
them runs as a single unit through ``run_in_transaction`` so a user never
lists a retired match and an active match is never missing from a user's
list.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import crud, schemas
from campusmatch.core.config import settings
from campusmatch.core.errors import (
    AccessDeniedError, DuplicateActionError, NotFoundError, SelfActionError
)
from campusmatch.db.unit_of_work import run_in_transaction
from campusmatch.models.enums import SwipeAction
from campusmatch.models.match import Match

logger = logging.getLogger(__name__)


async def _lock_pair(db: AsyncSession, *, actor_id: int, target_id: int) -> None:
    users = await crud.crud_user.lock_users(db, user_ids=[actor_id, target_id])
    if not any(user.id == target_id for user in users):
        raise NotFoundError("User not found.")


async def _load_for_viewer(db: AsyncSession, *, match_id: int, viewer_id: int) -> schemas.MatchRead:
    match = await crud.crud_match.get_match_by_id(db, match_id=match_id, with_details=True)
    return schemas.MatchRead.for_viewer(match, viewer_id)


async def _apply_match_transition(db: AsyncSession, *, user1_id: int, user2_id: int) -> Match:
    """Makes the pair matched: one active Match row plus both users' entries."""
    match, created = await crud.crud_match.activate_match_for_pair(db, user1_id=user1_id, user2_id=user2_id)
    await crud.crud_match.add_match_entries(db, match=match)
    if not created:
        logger.debug(f"Users {user1_id} and {user2_id} were already matched (match {match.id})")
    return match


async def like(db: AsyncSession, *, actor_id: int, target_id: int) -> schemas.LikeResult:
    if actor_id == target_id:
        logger.warning(f"User {actor_id} tried to like themselves")
        raise SelfActionError("You cannot like yourself.")

    async def work() -> Optional[int]:
        await _lock_pair(db, actor_id=actor_id, target_id=target_id)
        existing = await crud.crud_user.get_swipe(db, actor_id=actor_id, target_id=target_id)
        if existing is not None and existing.action == SwipeAction.LIKE:
            raise DuplicateActionError("You already liked this user.")

        # Replaces a previous dislike: the last action wins
        await crud.crud_user.record_swipe(db, actor_id=actor_id, target_id=target_id, action=SwipeAction.LIKE)

        if not await crud.crud_user.has_liked(db, actor_id=target_id, target_id=actor_id):
            return None
        match = await _apply_match_transition(db, user1_id=actor_id, user2_id=target_id)
        return match.id

    match_id = await run_in_transaction(
        db, work, operation=f"like {actor_id}->{target_id}", attempts=settings.MATCH_WRITE_ATTEMPTS
    )
    if match_id is None:
        logger.info(f"User {actor_id} liked user {target_id}")
        return schemas.LikeResult(is_match=False, message="Like sent successfully")

    logger.info(f"User {actor_id} liked user {target_id}: match {match_id}")
    match = await _load_for_viewer(db, match_id=match_id, viewer_id=actor_id)
    return schemas.LikeResult(is_match=True, match=match, message="It's a match!")


async def dislike(db: AsyncSession, *, actor_id: int, target_id: int) -> schemas.ActionResponse:
    if actor_id == target_id:
        logger.warning(f"User {actor_id} tried to dislike themselves")
        raise SelfActionError("You cannot dislike yourself.")

    async def work() -> None:
        await _lock_pair(db, actor_id=actor_id, target_id=target_id)
        existing = await crud.crud_user.get_swipe(db, actor_id=actor_id, target_id=target_id)
        if existing is not None and existing.action == SwipeAction.DISLIKE:
            raise DuplicateActionError("You already disliked this user.")
        await crud.crud_user.record_swipe(db, actor_id=actor_id, target_id=target_id, action=SwipeAction.DISLIKE)

    await run_in_transaction(
        db, work, operation=f"dislike {actor_id}->{target_id}", attempts=settings.MATCH_WRITE_ATTEMPTS
    )
    logger.info(f"User {actor_id} disliked user {target_id}")
    return schemas.ActionResponse(message="Dislike recorded successfully")


async def undo(db: AsyncSession, *, actor_id: int, target_id: int) -> schemas.ActionResponse:
    """Forgets the actor's like or dislike of target and retires their match.

    Undoing twice is harmless: the second call finds nothing to remove.
    """
    if actor_id == target_id:
        raise SelfActionError("You cannot undo an action on yourself.")

    async def work() -> tuple[bool, bool]:
        await crud.crud_user.lock_users(db, user_ids=[actor_id, target_id])
        removed = await crud.crud_user.remove_swipe(db, actor_id=actor_id, target_id=target_id)
        match = await crud.crud_match.get_match_for_pair(db, user1_id=actor_id, user2_id=target_id)
        retired = False
        if match is not None and match.is_active:
            await crud.crud_match.retire_match(db, match=match)
            retired = True
        return removed, retired

    removed, retired = await run_in_transaction(db, work, operation=f"undo {actor_id}->{target_id}")
    if not removed and not retired:
        logger.debug(f"Nothing to undo for user {actor_id} on user {target_id}")
        return schemas.ActionResponse(message="Nothing to undo")
    logger.info(f"User {actor_id} undid their action on user {target_id} (match retired: {retired})")
    return schemas.ActionResponse(message="Action undone successfully")


async def unmatch(db: AsyncSession, *, match_id: int, requester_id: int) -> schemas.ActionResponse:
    async def work() -> None:
        match = await crud.crud_match.get_match_by_id(db, match_id=match_id)
        if match is None:
            raise NotFoundError("Match not found.")
        if not match.has_participant(requester_id):
            logger.warning(f"User {requester_id} tried to unmatch match {match_id} they are not part of")
            raise AccessDeniedError("Access denied to this match.")
        # Users first, then the match row: same lock order as like()
        await crud.crud_user.lock_users(db, user_ids=match.user_ids)
        match = await crud.crud_match.get_match_by_id(db, match_id=match_id, for_update=True)
        if match.is_active:
            await crud.crud_match.retire_match(db, match=match)
        else:
            await crud.crud_match.remove_match_entries(db, match=match)

    await run_in_transaction(db, work, operation=f"unmatch {match_id}")
    logger.info(f"User {requester_id} unmatched match {match_id}")
    return schemas.ActionResponse(message="Successfully unmatched")


async def list_matches(db: AsyncSession, *, user_id: int) -> schemas.MatchList:
    matches = await crud.crud_match.get_active_matches_for_user(db, user_id=user_id)
    items = [schemas.MatchRead.for_viewer(match, user_id) for match in matches]
    return schemas.MatchList(matches=items, count=len(items))


async def get_match(db: AsyncSession, *, match_id: int, user_id: int) -> schemas.MatchDetail:
    match = await crud.crud_match.get_match_by_id(db, match_id=match_id, with_details=True)
    if match is None:
        raise NotFoundError("Match not found.")
    if not match.has_participant(user_id):
        raise AccessDeniedError("Access denied to this match.")
    return schemas.MatchDetail(match=schemas.MatchRead.for_viewer(match, user_id))
