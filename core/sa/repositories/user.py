# core/sa/repositories/user.py
import logging
from typing import Optional
from datetime import datetime, UTC
from sqlalchemy import or_, update
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from core.exceptions import ConflictError
from core.sa.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for managing User credentials and profile fields."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.
        
        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by their ID.
        
        Args:
            user_id: The ID of the user to retrieve
            
        Returns:
            The User object if found, None otherwise
        """
        return self.session.query(User).filter(User.id == user_id).one_or_none()

    def get_by_username(self, username: str) -> Optional[User]:
        return self.session.query(User).filter(User.username == username).one_or_none()

    def find_by_identifier(self, email: Optional[str] = None, username: Optional[str] = None) -> Optional[User]:
        """Find the user matching either the email or the username.
        
        Args:
            email: Email to match, ignored when empty
            username: Username to match, ignored when empty
            
        Returns:
            The first matching User, or None if nothing matches
        """
        conditions = []
        if email:
            conditions.append(User.email == email)
        if username:
            conditions.append(User.username == username)
        if not conditions:
            return None
        return (
            self.session.query(User)
            .filter(or_(*conditions))
            .order_by(User.id)
            .first()
        )

    def exists_with_email_or_username(self, email: str, username: str) -> bool:
        return self.find_by_identifier(email=email, username=username) is not None

    def create_user(
        self,
        email: str,
        password_hash: str,
        username: str,
        nickname: str,
        bio: Optional[str] = None
    ) -> User:
        """Create a new user.
        
        Args:
            email: Unique email address
            password_hash: Already hashed password
            username: Unique username
            nickname: Display name
            bio: Optional biography
            
        Returns:
            The created User object
            
        Raises:
            ConflictError: If the email or username is already taken
        """
        user = User(
            email=email,
            password=password_hash,
            username=username,
            nickname=nickname,
            bio=bio or '',
        )
        self.session.add(user)
        try:
            self.session.commit()
            return user
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("User with this email or username already exists")

    def record_failed_login(self, user_id: int, attempted_at: Optional[datetime] = None) -> None:
        """Increment the failure counter in a single UPDATE so concurrent failures all count."""
        attempted_at = attempted_at or datetime.now(UTC)
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                login_attempt=User.login_attempt + 1,
                last_login_attempt=attempted_at,
            )
        )
        self.session.commit()

    def reset_login_attempts(self, user_id: int) -> None:
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(login_attempt=0)
        )
        self.session.commit()

    def update_profile(
        self,
        user_id: int,
        nickname: Optional[str] = None,
        bio: Optional[str] = None
    ) -> Optional[User]:
        """Update a user's profile fields. Only supplied fields are written.
        
        Args:
            user_id: The ID of the user to update
            nickname: Optional new nickname
            bio: Optional new bio
            
        Returns:
            The updated User object if found, None otherwise
        """
        user = self.get_by_id(user_id)
        if not user:
            return None

        if nickname is not None:
            user.nickname = nickname
        if bio is not None:
            user.bio = bio

        self.session.commit()
        return user

    def update_password(self, user_id: int, password_hash: str) -> Optional[User]:
        user = self.get_by_id(user_id)
        if not user:
            return None
        user.password = password_hash
        self.session.commit()
        return user

    def set_profile_picture(self, user_id: int, filename: Optional[str]) -> Optional[User]:
        user = self.get_by_id(user_id)
        if not user:
            return None
        user.profile_picture = filename
        self.session.commit()
        return user
