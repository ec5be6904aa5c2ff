from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional


class SignupIn(BaseModel):
    name: str
    email: str
    password: str
    password_confirmation: str


class UserUpdateIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    password_confirmation: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    admin: bool
    created_at: Optional[datetime] = None


class TokenOut(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    remember_token: Optional[str] = None


class ActionOkOut(BaseModel):
    ok: bool = True
    message: Optional[str] = None


class ValidationErrorOut(BaseModel):
    errors: dict[str, list[str]]
