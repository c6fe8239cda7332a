from pydantic import BaseModel


class ActionResponse(BaseModel):
    success: bool = True
    message: str


# Body of every failed request, see campusmatch.core.errors
class ErrorResponse(BaseModel):
    success: bool = False
    kind: str
    message: str
