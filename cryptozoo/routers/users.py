"""
User management endpoints for admins.
"""
from fastapi import APIRouter, Depends, Path
from typing import List

from cryptozoo.application.user_service import UserService, display_name
from cryptozoo.dependencies import get_admin_session, get_user_service
from cryptozoo.domain.session import SessionContext
from cryptozoo.schemas.api_schemas import User, UserUpdate

router = APIRouter(prefix="/manage-users")


def _to_schema(user) -> User:
    return User(**user.to_dict(), display_name=display_name(user))


@router.get("", response_model=List[User])
def list_users(
    session: SessionContext = Depends(get_admin_session),
    service: UserService = Depends(get_user_service),
):
    """
    All users newest first.
    """
    return [_to_schema(user) for user in service.list_users(session)]


@router.put("/{user_id}", response_model=User)
def update_user(
    changes: UserUpdate,
    user_id: str = Path(..., title="The ID of the user to update"),
    session: SessionContext = Depends(get_admin_session),
    service: UserService = Depends(get_user_service),
):
    """
    Update a user's names and role.
    """
    user, _ = service.update_user(
        session,
        user_id,
        first_name=changes.first_name,
        last_name=changes.last_name,
        role=changes.role,
    )
    return _to_schema(user)
