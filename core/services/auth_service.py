# core/services/auth_service.py
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from core.auth.passwords import hash_password, verify_password
from core.auth.tokens import TokenService
from core.exceptions import (
    BadRequestError, ConflictError, InvalidTokenError, NotFoundError,
    TooManyRequestsError, UnauthorizedError
)
from core.sa.models import User
from core.sa.repositories.user import UserRepository

logger = logging.getLogger(__name__)

NICKNAME_MAX_LENGTH = 50
BIO_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

# A lockout window opens after every LOCKOUT_EVERY consecutive failures
LOCKOUT_EVERY = 3

INVALID_CREDENTIALS = "Invalid credentials"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _clean_nickname(nickname: str) -> str:
    nickname = nickname.strip()
    if not 1 <= len(nickname) <= NICKNAME_MAX_LENGTH:
        raise BadRequestError(f"Nickname must be between 1 and {NICKNAME_MAX_LENGTH} characters")
    return nickname


def _clean_bio(bio: str) -> str:
    bio = bio.strip()
    if len(bio) > BIO_MAX_LENGTH:
        raise BadRequestError(f"Bio must be at most {BIO_MAX_LENGTH} characters")
    return bio


class AuthService:
    """Registration, login with lockout, and profile/password changes."""

    def __init__(
        self,
        session: Session,
        token_service: TokenService,
        login_cooldown: timedelta = timedelta(seconds=30),
        hash_rounds: int = 10
    ):
        self.session = session
        self.users = UserRepository(session)
        self.tokens = token_service
        self.login_cooldown = login_cooldown
        self.hash_rounds = hash_rounds

    def issue_token(self, user: User) -> str:
        return self.tokens.issue(TokenService.user_claims(user))

    def register(
        self,
        email: str,
        password: str,
        username: str,
        nickname: str,
        bio: Optional[str] = None
    ) -> Tuple[User, str]:
        """Create an account and return it together with a fresh token.
        
        Raises:
            BadRequestError: If a required field is missing or out of bounds
            ConflictError: If the email or username is already registered
        """
        if _is_blank(email) or not password or _is_blank(username) or _is_blank(nickname):
            raise BadRequestError("Missing required fields")

        email = email.strip()
        username = username.strip()
        nickname = _clean_nickname(nickname)
        bio = _clean_bio(bio) if bio else ''

        if self.users.exists_with_email_or_username(email, username):
            raise ConflictError("User with this email or username already exists")

        user = self.users.create_user(
            email=email,
            password_hash=hash_password(password, self.hash_rounds),
            username=username,
            nickname=nickname,
            bio=bio,
        )
        logger.info(f"Registered user {user.id} ({user.username})")
        return user, self.issue_token(user)

    def _check_lockout(self, user: User, now: datetime) -> None:
        attempts = user.login_attempt or 0
        if attempts == 0 or attempts % LOCKOUT_EVERY != 0 or user.last_login_attempt is None:
            return
        unlock_at = user.last_login_attempt + self.login_cooldown
        if now < unlock_at:
            retry_after = max(1, int((unlock_at - now).total_seconds() + 0.999))
            logger.warning(f"Login lockout active for user {user.id}")
            raise TooManyRequestsError(retry_after=retry_after)

    def login(
        self,
        password: Optional[str],
        email: Optional[str] = None,
        username: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Tuple[User, str]:
        """Authenticate by email or username.
        
        Raises:
            BadRequestError: If no identifier or no password was supplied
            UnauthorizedError: If the user is unknown or the password is wrong
            TooManyRequestsError: If the lockout window is active
        """
        if (_is_blank(email) and _is_blank(username)) or not password:
            raise BadRequestError("Missing required fields")

        now = now or datetime.now(UTC)
        user = self.users.find_by_identifier(
            email=email.strip() if email else None,
            username=username.strip() if username else None,
        )
        if user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        self._check_lockout(user, now)

        if not verify_password(password, user.password):
            self.users.record_failed_login(user.id, now)
            logger.warning(f"Failed login for user {user.id}")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if user.login_attempt:
            self.users.reset_login_attempts(user.id)
        return user, self.issue_token(user)

    def current_user(self, token: Optional[str]) -> User:
        """Resolve a token to the live user record.
        
        Raises:
            UnauthorizedError: If the token is missing, invalid or expired, or the user is gone
        """
        claims = self.tokens.verify(token)
        user_id = claims.get('id')
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError()
        user = self.users.get_by_id(user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return user

    def update_profile(self, user_id: int, nickname: Optional[str] = None, bio: Optional[str] = None) -> User:
        if nickname is None and bio is None:
            raise BadRequestError("At least one of nickname or bio is required")

        user = self.users.update_profile(
            user_id,
            nickname=_clean_nickname(nickname) if nickname is not None else None,
            bio=_clean_bio(bio) if bio is not None else None,
        )
        if user is None:
            raise NotFoundError("User not found")
        return user

    def change_password(
        self,
        user_id: int,
        current_password: Optional[str],
        new_password: Optional[str],
        confirm_password: Optional[str]
    ) -> None:
        if not current_password or not new_password or not confirm_password:
            raise BadRequestError("Missing required fields")
        if not PASSWORD_MIN_LENGTH <= len(new_password) <= PASSWORD_MAX_LENGTH:
            raise BadRequestError(
                f"New password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
            )
        if new_password != confirm_password:
            raise BadRequestError("New password and confirmation do not match")
        if new_password == current_password:
            raise BadRequestError("New password must be different from the current password")

        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(current_password, user.password):
            raise UnauthorizedError("Current password is incorrect")

        self.users.update_password(user_id, hash_password(new_password, self.hash_rounds))
        logger.info(f"Password changed for user {user_id}")
