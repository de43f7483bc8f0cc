from sqlmodel import Session

from app.models.site_settings import SITE_SETTINGS_ID, SiteSettings


class SiteSettingsRepository:
    """
    Data access for the single site_settings row.
    """

    def get(self, session: Session) -> SiteSettings | None:
        return session.get(SiteSettings, SITE_SETTINGS_ID)

    def save(self, session: Session, settings: SiteSettings) -> SiteSettings:
        session.add(settings)
        session.commit()
        session.refresh(settings)
        return settings
