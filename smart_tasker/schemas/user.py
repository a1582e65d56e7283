from pydantic import BaseModel
from typing import Optional


class Credentials(BaseModel):
    """Signup/login body. Fields are optional so that missing ones surface as 400."""
    email: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class LoginResponse(MessageResponse):
    email: str
