# carit/schemas/user.py
from pydantic import BaseModel
from typing import Optional


class CreateUserIn(BaseModel):
    name: str
    email: str


class CreateUserOut(BaseModel):
    message: str


class UserDataIn(BaseModel):
    """Profile fields a client may set. Only the fields actually sent are written."""
    name: Optional[str] = None
    email: Optional[str] = None
    experienceLevel: Optional[int] = None


class UserDataOut(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    experienceLevel: Optional[int] = None
