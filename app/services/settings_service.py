from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.models.site_settings import SiteSettings
from app.repositories.settings_repo import SiteSettingsRepository
from app.schemas.settings import SiteSettingsUpdate


class SiteSettingsService:
    """
    Singleton site configuration.

    The row is created with defaults on first read, so there is
    always exactly one.
    """

    def __init__(self, repo: SiteSettingsRepository):
        self.repo = repo

    def get_settings(self, session: Session) -> SiteSettings:
        current = self.repo.get(session)
        if current is not None:
            return current
        try:
            return self.repo.save(session, SiteSettings())
        except IntegrityError:
            # Another request created the row first
            session.rollback()
            return self.repo.get(session)

    def update_settings(self, session: Session, payload: SiteSettingsUpdate) -> SiteSettings:
        current = self.get_settings(session)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(current, field, value)
        current.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, current)

    def tax_percentage(self, session: Session) -> Decimal:
        current = self.repo.get(session)
        if current is None or current.tax_percentage is None:
            return Decimal(0)
        return Decimal(current.tax_percentage)
