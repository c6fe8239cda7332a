from pydantic import BaseModel
from typing import Optional

from .user import UserDetail

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenWithUser(Token):
    user: UserDetail

class TokenPayload(BaseModel):
    sub: Optional[str] = None # 'sub' is the standard JWT field for subject (usually user identifier)
    user_id: Optional[int] = None
