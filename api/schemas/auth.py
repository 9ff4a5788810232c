# api/schemas/auth.py
from typing import Optional
from pydantic import BaseModel, ConfigDict


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None
    nickname: Optional[str] = None
    bio: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(BaseModel):
    nickname: Optional[str] = None
    bio: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None


class UserSchema(BaseModel):
    id: int
    email: str
    username: str
    nickname: str
    bio: str = ''
    profile_picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    user: UserSchema


class AuthResponse(UserResponse):
    token: str


class MessageResponse(BaseModel):
    message: str
