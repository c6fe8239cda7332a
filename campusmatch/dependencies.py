import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import crud, models, schemas, security
from campusmatch.core.config import settings
from campusmatch.db.session import get_db

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")


async def get_current_user(
    db: AsyncSession = Depends(get_db), token: str = Depends(oauth2_scheme)
) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized, token failed",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = security.decode_access_token(token)
        token_data = schemas.TokenPayload(**payload)
        if token_data.user_id is None:
            raise credentials_exception
    except (JWTError, ValidationError) as e:
        logger.debug(f"Rejected access token: {e}")
        raise credentials_exception

    user = await crud.crud_user.get_user_by_id(
        db, user_id=token_data.user_id, options=crud.crud_user.USER_PUBLIC_OPTIONS
    )
    if user is None:
        logger.warning(f"Token for unknown user ID {token_data.user_id}")
        raise credentials_exception
    return user


async def get_current_active_user(
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return current_user
