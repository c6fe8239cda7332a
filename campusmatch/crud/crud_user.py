from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from sqlalchemy.orm import Load, selectinload
import logging
from typing import List, Optional, Sequence

from campusmatch.models.user import User
from campusmatch.models.swipe import Swipe
from campusmatch.models.enums import Gender, InterestedIn, SwipeAction
from campusmatch.schemas.user import UserCreate
from campusmatch.utils.dates import utcnow

logger = logging.getLogger(__name__)

# Everything needed to render a user without lazy loading
USER_PUBLIC_OPTIONS: List[Load] = [selectinload(User.photos)]


async def get_user_by_id(
    db: AsyncSession, *, user_id: int, options: Optional[Sequence[Load]] = None
) -> Optional[User]:
    statement = select(User).where(User.id == user_id)
    if options:
        statement = statement.options(*options).execution_options(populate_existing=True)
    result = await db.execute(statement)
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, *, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.email == email.lower()).options(*USER_PUBLIC_OPTIONS)
    )
    return result.scalar_one_or_none()


async def lock_users(db: AsyncSession, *, user_ids: Sequence[int]) -> List[User]:
    """Row-locks the given users in id order for the rest of the transaction.

    Two requests touching the same pair of users always acquire the locks in
    the same order, so they serialise instead of deadlocking. Databases
    without row locks (SQLite) ignore the FOR UPDATE clause.
    """
    statement = (
        select(User)
        .where(User.id.in_(sorted(set(user_ids))))
        .order_by(User.id)
        .with_for_update()
    )
    result = await db.execute(statement)
    return result.scalars().all()


async def create_user(db: AsyncSession, *, obj_in: UserCreate, hashed_password: str) -> User:
    location = obj_in.location
    db_user = User(
        email=obj_in.email.lower(),
        hashed_password=hashed_password,
        name=obj_in.name,
        age=obj_in.age,
        gender=obj_in.gender,
        interested_in=obj_in.interested_in,
        bio=obj_in.bio,
        latitude=location.latitude if location else 0.0,
        longitude=location.longitude if location else 0.0,
        city=location.city if location else "",
        interests=[],
        photos=[],
    )
    db.add(db_user)
    await db.flush()
    logger.info(f"Created user {db_user.id} ({db_user.email})")
    return db_user


# --- Swipes (likes / dislikes) ---

async def get_swipe(db: AsyncSession, *, actor_id: int, target_id: int) -> Optional[Swipe]:
    """Primary key lookup of the actor's swipe on target."""
    return await db.get(Swipe, (actor_id, target_id))


async def has_liked(db: AsyncSession, *, actor_id: int, target_id: int) -> bool:
    swipe = await get_swipe(db, actor_id=actor_id, target_id=target_id)
    return swipe is not None and swipe.action == SwipeAction.LIKE


async def record_swipe(
    db: AsyncSession, *, actor_id: int, target_id: int, action: SwipeAction
) -> Swipe:
    """Stores ``action`` as the actor's only swipe on target.

    A previous swipe with the opposite action is replaced, so the target
    leaves the likes set when it enters the dislikes set and vice versa.
    """
    swipe = await get_swipe(db, actor_id=actor_id, target_id=target_id)
    if swipe is None:
        swipe = Swipe(actor_id=actor_id, target_id=target_id, action=action)
        db.add(swipe)
    else:
        logger.debug(f"User {actor_id} changes swipe on {target_id} from {swipe.action.value} to {action.value}")
        swipe.action = action
        swipe.created_at = utcnow()
    await db.flush()
    return swipe


async def remove_swipe(db: AsyncSession, *, actor_id: int, target_id: int) -> bool:
    result = await db.execute(
        delete(Swipe).where(Swipe.actor_id == actor_id, Swipe.target_id == target_id)
    )
    return result.rowcount > 0


# --- Discovery ---

async def get_discovery_candidates(
    db: AsyncSession, *, user: User, skip: int, limit: int
) -> List[User]:
    """One page of users that pass the static discovery predicates.

    Not self, active, within the user's age range, of the gender the user is
    interested in, and neither liked nor disliked by the user yet. Ordered by
    id so pages are stable.
    """
    swiped = select(Swipe.target_id).where(Swipe.actor_id == user.id)
    statement = (
        select(User)
        .where(
            User.id != user.id,
            User.is_active.is_(True),
            User.age >= user.age_min,
            User.age <= user.age_max,
            User.id.not_in(swiped),
        )
        .options(*USER_PUBLIC_OPTIONS)
        .order_by(User.id)
        .offset(skip)
        .limit(limit)
    )
    if user.interested_in != InterestedIn.BOTH:
        statement = statement.where(User.gender == Gender(user.interested_in.value))
    result = await db.execute(statement)
    return result.scalars().all()
