"""User repository for database operations."""
from typing import Optional

from sqlmodel import Session, SQLModel

from ..models import User, UserCreate
from ..repository import BaseRepository


class UserRepository(BaseRepository[User, UserCreate, SQLModel]):
    """Repository for User entities."""

    def __init__(self, session: Session):
        super().__init__(User, session)

    def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        return self.get_by_field("username", username)
