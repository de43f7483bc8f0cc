import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.admin_user import AdminUser


class AdminUserRepository:
    """
    Data access layer for AdminUser.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> AdminUser | None:
        """Return an AdminUser by primary key, or None if not found."""
        return session.get(AdminUser, user_id)

    def get_by_username(self, session: Session, username: str) -> AdminUser | None:
        stmt = select(AdminUser).where(AdminUser.username == username)
        return session.exec(stmt).first()

    def get_by_email(self, session: Session, email: str) -> AdminUser | None:
        stmt = select(AdminUser).where(AdminUser.email == email)
        return session.exec(stmt).first()

    def count(self, session: Session) -> int:
        value = session.exec(select(func.count()).select_from(AdminUser)).one()
        return int(value or 0)

    def count_by_role(self, session: Session, role: str) -> int:
        stmt = select(func.count()).select_from(AdminUser).where(AdminUser.role == role)
        return int(session.exec(stmt).one() or 0)

    def list_users(self, session: Session) -> list[AdminUser]:
        stmt = select(AdminUser).order_by(AdminUser.created_at)
        return session.exec(stmt).all()

    def create(self, session: Session, user: AdminUser) -> AdminUser:
        """Insert a new AdminUser and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: AdminUser) -> AdminUser:
        """Persist changes to an existing AdminUser."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: AdminUser) -> None:
        session.delete(user)
        session.commit()
