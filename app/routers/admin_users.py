# app/routers/admin_users.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_superadmin
from app.database import get_session
from app.models.admin_user import AdminUser
from app.repositories.admin_user_repo import AdminUserRepository
from app.schemas.admin_user import AdminUserCreate, AdminUserRead, AdminUserUpdate
from app.services.admin_user_service import AdminUserService

router = APIRouter(
    prefix="/admin/users",
    tags=["Admin users"],
    dependencies=[Depends(require_superadmin)],
)

service = AdminUserService(AdminUserRepository())


@router.get("", response_model=list[AdminUserRead])
def list_admin_users(session: Session = Depends(get_session)):
    return service.list_users(session)


@router.post(
    "",
    response_model=AdminUserRead,
    status_code=status.HTTP_201_CREATED,
)
def create_admin_user(
    payload: AdminUserCreate,
    session: Session = Depends(get_session),
):
    """
    Create a back-office account (superadmin only).
    """
    return service.create_user(session, payload)


@router.get("/{user_id}", response_model=AdminUserRead)
def get_admin_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_user(session, user_id)


@router.put("/{user_id}", response_model=AdminUserRead)
def update_admin_user(
    user_id: uuid.UUID,
    payload: AdminUserUpdate,
    session: Session = Depends(get_session),
):
    """
    Update username, email, role or password (re-hashed).
    """
    return service.update_user(session, user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_admin_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: AdminUser = Depends(require_superadmin),
):
    service.delete_user(session, user_id, current_user)
    return None
