# api/models/session_models.py
from pydantic import BaseModel
from typing import Optional


class SignupRequest(BaseModel):
    name: Optional[str] = ""
    email: Optional[str] = ""
    password: Optional[str] = ""


class LoginRequest(BaseModel):
    email: Optional[str] = ""
    password: Optional[str] = ""


class UserResponse(BaseModel):
    id: str
    name: str
    email: str


class SessionResponse(BaseModel):
    user: UserResponse
    redirect: Optional[str] = None
    token: Optional[str] = None
