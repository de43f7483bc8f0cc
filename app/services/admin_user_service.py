import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.auth import DUMMY_PASSWORD_HASH, hash_password, verify_password
from app.core.config import Settings
from app.models.admin_user import AdminUser
from app.repositories.admin_user_repo import AdminUserRepository
from app.schemas.admin_user import AdminUserCreate, AdminUserUpdate

logger = logging.getLogger(__name__)


class AdminUserService:
    """
    Business logic for back-office accounts.

    Responsibilities:
      - credential checks (one generic error for any failure)
      - username/email uniqueness
      - password hashing on create/update
    """

    def __init__(self, repo: AdminUserRepository):
        self.repo = repo

    # ----- Authentication -----

    def authenticate(self, session: Session, username: str, password: str) -> AdminUser:
        """
        Return the admin for valid credentials.

        Raises:
            HTTPException(401): "Invalid credentials" whether the username
                is unknown or the password is wrong.
        """
        user = self.repo.get_by_username(session, username.strip())

        if user is None:
            # Same bcrypt cost as a real check
            verify_password(password, DUMMY_PASSWORD_HASH)
            valid = False
        else:
            valid = verify_password(password, user.password_hash)

        if not valid:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
            )
        return user

    # ----- Management (superadmin) -----

    def _ensure_unique(
        self,
        session: Session,
        username: str | None,
        email: str | None,
        user_id: uuid.UUID | None = None,
    ) -> None:
        if username is not None:
            other = self.repo.get_by_username(session, username)
            if other is not None and other.id != user_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Username already exists",
                )
        if email is not None:
            other = self.repo.get_by_email(session, email)
            if other is not None and other.id != user_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Email already exists",
                )

    def list_users(self, session: Session) -> list[AdminUser]:
        return self.repo.list_users(session)

    def get_user(self, session: Session, user_id: uuid.UUID) -> AdminUser:
        """
        Raises:
            HTTPException(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def create_user(self, session: Session, payload: AdminUserCreate) -> AdminUser:
        self._ensure_unique(session, payload.username, payload.email)
        user = AdminUser(
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role,
        )
        return self.repo.create(session, user)

    def update_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: AdminUserUpdate,
    ) -> AdminUser:
        user = self.get_user(session, user_id)
        self._ensure_unique(session, payload.username, payload.email, user.id)

        if (
            user.role == "superadmin"
            and payload.role is not None
            and payload.role != "superadmin"
            and self.repo.count_by_role(session, "superadmin") <= 1
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="At least one superadmin account is required",
            )

        if payload.username is not None:
            user.username = payload.username
        if payload.email is not None:
            user.email = payload.email
        if payload.password is not None:
            user.password_hash = hash_password(payload.password)
        if payload.role is not None:
            user.role = payload.role

        return self.repo.update(session, user)

    def delete_user(self, session: Session, user_id: uuid.UUID, current: AdminUser) -> None:
        user = self.get_user(session, user_id)
        if user.id == current.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot delete your own account",
            )
        self.repo.delete(session, user)

    # ----- Startup -----

    def ensure_bootstrap_admin(self, session: Session, settings: Settings) -> AdminUser | None:
        """
        Create the first superadmin from BOOTSTRAP_ADMIN_* settings when
        there are no accounts yet. No-op otherwise.
        """
        if not (settings.BOOTSTRAP_ADMIN_USERNAME and settings.BOOTSTRAP_ADMIN_PASSWORD):
            return None
        if self.repo.count(session) > 0:
            return None

        user = AdminUser(
            username=settings.BOOTSTRAP_ADMIN_USERNAME,
            email=settings.BOOTSTRAP_ADMIN_EMAIL or f"{settings.BOOTSTRAP_ADMIN_USERNAME}@localhost",
            password_hash=hash_password(settings.BOOTSTRAP_ADMIN_PASSWORD),
            role="superadmin",
        )
        user = self.repo.create(session, user)
        logger.info("Created bootstrap superadmin %r", user.username)
        return user
