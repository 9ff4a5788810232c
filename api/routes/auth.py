# api/routes/auth.py

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import FileResponse

from core.exceptions import NotFoundError
from core.sa.models import User
from core.services.auth_service import AuthService
from core.services.profile_pictures import ProfilePictureStore
from api.dependencies import get_auth_service, get_current_user, get_profile_picture_store
from api.schemas.auth import (
    AuthResponse, LoginRequest, MessageResponse, PasswordChange,
    ProfileUpdate, RegisterRequest, UserResponse, UserSchema
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(user=UserSchema.model_validate(user), token=token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Create an account and return it with a session token."""
    user, token = auth_service.register(
        email=payload.email,
        password=payload.password,
        username=payload.username,
        nickname=payload.nickname,
        bio=payload.bio,
    )
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Authenticate with an email or a username."""
    user, token = auth_service.login(
        password=payload.password,
        email=payload.email,
        username=payload.username,
    )
    return _auth_response(user, token)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return UserResponse(user=UserSchema.model_validate(user))


@router.put("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    updated = auth_service.update_profile(user.id, nickname=payload.nickname, bio=payload.bio)
    return UserResponse(user=UserSchema.model_validate(updated))


@router.put("/password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    auth_service.change_password(
        user.id,
        current_password=payload.current_password,
        new_password=payload.new_password,
        confirm_password=payload.confirm_password,
    )
    return MessageResponse(message="Password updated")


@router.put("/profile-picture", response_model=UserResponse)
def upload_profile_picture(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    store: ProfilePictureStore = Depends(get_profile_picture_store)
):
    """Store the caller's profile picture, replacing the previous one."""
    content = file.file.read(store.max_bytes + 1)
    updated = store.save(user, content, file.content_type or '')
    return UserResponse(user=UserSchema.model_validate(updated))


@router.get("/profile-picture")
def get_profile_picture(
    user: User = Depends(get_current_user),
    store: ProfilePictureStore = Depends(get_profile_picture_store)
):
    path = store.path_for(user)
    if path is None:
        raise NotFoundError("No profile picture")
    return FileResponse(path, media_type=store.media_type_for(path))


@router.delete("/profile-picture", response_model=MessageResponse)
def delete_profile_picture(
    user: User = Depends(get_current_user),
    store: ProfilePictureStore = Depends(get_profile_picture_store)
):
    store.delete(user)
    return MessageResponse(message="Profile picture removed")
