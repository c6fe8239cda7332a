from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from campusmatch import models, schemas, services
from campusmatch.db.session import get_db
from campusmatch.dependencies import get_current_active_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=schemas.TokenWithUser, status_code=status.HTTP_201_CREATED)
async def register(user_in: schemas.UserCreate, db: AsyncSession = Depends(get_db)):
    return await services.auth_service.register(db, user_in)


@router.post("/login", response_model=schemas.TokenWithUser)
async def login_for_access_token_route(
    db: AsyncSession = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()
):
    """
    OAuth2 password flow; ``username`` carries the email address.
    """
    token = await services.auth_service.authenticate(db, form_data.username, form_data.password)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


@router.post("/logout", response_model=schemas.ActionResponse)
async def logout(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.auth_service.logout(db, current_user.id)


@router.get("/me", response_model=schemas.UserDetail)
async def read_current_user(current_user: models.User = Depends(get_current_active_user)):
    return schemas.UserDetail.from_user(current_user)
