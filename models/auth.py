from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    username: str
    name: str
    email: EmailStr
    password: str
    major: Optional[str] = None
    university: Optional[str] = None
    target_position: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: Optional[int] = None
    email: Optional[str] = None


class User(BaseModel):
    id: int
    username: str
    email: str
    name: str
    major: Optional[str] = None
    university: Optional[str] = None
    target_position: Optional[str] = None
    created_at: datetime
