import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import crud, models, schemas, security
from campusmatch.core.errors import DuplicateActionError, NotFoundError
from campusmatch.db.unit_of_work import run_in_transaction
from campusmatch.utils.dates import utcnow

logger = logging.getLogger(__name__)


def _token_response(user: models.User) -> schemas.TokenWithUser:
    return schemas.TokenWithUser(
        access_token=security.create_access_token_for_user(user),
        token_type="bearer",
        user=schemas.UserDetail.from_user(user),
    )


async def register(db: AsyncSession, user_in: schemas.UserCreate) -> schemas.TokenWithUser:
    """Creates the account and logs it in.

    The email check runs inside the unit: when a concurrent registration
    commits the same email first, the insert fails, the unit is re-run and
    the check reports the duplicate.
    """
    hashed_password = security.get_password_hash(user_in.password)

    async def work() -> models.User:
        if await crud.crud_user.get_user_by_email(db, email=user_in.email):
            raise DuplicateActionError("User already exists with this email.")
        return await crud.crud_user.create_user(
            db, obj_in=user_in, hashed_password=hashed_password
        )

    user = await run_in_transaction(db, work, operation=f"register {user_in.email}", attempts=2)
    logger.info(f"Registered user {user.id}")
    return _token_response(user)


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[schemas.TokenWithUser]:
    """Returns a token for valid credentials and marks the user online, else None."""
    user = await crud.crud_user.get_user_by_email(db, email=email)
    if not user or not security.verify_password(password, user.hashed_password):
        logger.info(f"Failed login attempt for {email}")
        return None
    if not user.is_active:
        logger.info(f"Login attempt for deactivated user {user.id}")
        return None

    async def work() -> models.User:
        user.is_online = True
        user.last_active = utcnow()
        await db.flush()
        return user

    logged_in = await run_in_transaction(db, work, operation=f"login user {user.id}")
    return _token_response(logged_in)


async def logout(db: AsyncSession, user_id: int) -> schemas.ActionResponse:
    async def work() -> None:
        user = await crud.crud_user.get_user_by_id(db, user_id=user_id)
        if user is None:
            raise NotFoundError("User not found.")
        user.is_online = False
        user.last_active = utcnow()
        await db.flush()

    await run_in_transaction(db, work, operation=f"logout user {user_id}")
    logger.info(f"User {user_id} logged out")
    return schemas.ActionResponse(message="Logged out successfully")
