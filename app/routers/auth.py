# app/routers/auth.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from app.core.auth import end_session, require_admin, start_session
from app.database import get_session
from app.models.admin_user import AdminUser
from app.repositories.admin_user_repo import AdminUserRepository
from app.schemas.admin_user import AdminUserRead, LoginRequest
from app.services.admin_user_service import AdminUserService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AdminUserService(AdminUserRepository())


@router.post("/login", response_model=AdminUserRead)
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_session),
):
    """
    Start a back-office session.

    - Sets an HttpOnly signed session cookie.
    - Any failure returns 401 "Invalid credentials".
    """
    user = service.authenticate(session, payload.username, payload.password)
    start_session(response, user)
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    end_session(response)
    return None


@router.get("/session", response_model=AdminUserRead)
def current_session(current_user: AdminUser = Depends(require_admin)):
    """
    The logged-in admin, or 401 "Not authenticated".
    """
    return current_user
