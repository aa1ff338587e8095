from sqlalchemy.orm import Session
from typing import List, Optional

from cryptozoo.db.models import User, utcnow
from cryptozoo.db.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Repository for user profile operations."""
    
    def __init__(self, db: Session):
        super().__init__(db)
    
    def create(self, user_id: str, email: str, first_name: str = "",
               last_name: str = "", role: str = "pending") -> User:
        """
        Create a user profile for an account issued by the auth service.
        
        Args:
            user_id: Auth service user ID
            email: Account email
            first_name: First name (optional)
            last_name: Last name (optional)
            role: Initial role, "pending" on sign-up
            
        Returns:
            Created user
        """
        user = User(
            id=user_id,
            email=email,
            first_name=first_name or "",
            last_name=last_name or "",
            role=role,
            created_at=utcnow(),
        )
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user
    
    def get(self, user_id: str) -> Optional[User]:
        """
        Get a user by ID.
        
        Args:
            user_id: User ID
            
        Returns:
            User if found, None otherwise
        """
        return self.db.query(User).filter(User.id == user_id).first()
    
    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by email (case-insensitive).
        
        Args:
            email: Account email
            
        Returns:
            User if found, None otherwise
        """
        return self.db.query(User).filter(User.email.ilike(email)).first()
    
    def list_all(self) -> List[User]:
        """
        Get all users, newest first.
        
        Returns:
            List of all users
        """
        return self.db.query(User).order_by(User.created_at.desc()).all()
    
    def update(self, user_id: str, first_name: str = None, last_name: str = None,
               role: str = None) -> Optional[User]:
        """
        Update a user's names and role; None leaves a field unchanged.
        
        Args:
            user_id: User ID
            first_name: New first name (optional)
            last_name: New last name (optional)
            role: New role (optional)
            
        Returns:
            Updated user or None if user not found
        """
        user = self.get(user_id)
        if not user:
            return None
        
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        if role is not None:
            user.role = role
        self._commit()
        self.db.refresh(user)
        return user
    
    def set_role(self, user_id: str, role: str) -> Optional[User]:
        """
        Change a user's role.
        
        Args:
            user_id: User ID
            role: "pending", "user" or "admin"
            
        Returns:
            Updated user or None if user not found
        """
        return self.update(user_id, role=role)
