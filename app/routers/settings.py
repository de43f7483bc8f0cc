# app/routers/settings.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.settings_repo import SiteSettingsRepository
from app.schemas.settings import SiteSettingsRead, SiteSettingsUpdate
from app.services.settings_service import SiteSettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])

service = SiteSettingsService(SiteSettingsRepository())


@router.get("", response_model=SiteSettingsRead)
def get_site_settings(session: Session = Depends(get_session)):
    """
    Public site configuration (contact info, carousel, tax, payment data).
    """
    return service.get_settings(session)


@router.put(
    "",
    response_model=SiteSettingsRead,
    dependencies=[Depends(require_admin)],
)
def update_site_settings(
    payload: SiteSettingsUpdate,
    session: Session = Depends(get_session),
):
    """
    Partially update site configuration (admin only).
    """
    return service.update_settings(session, payload)
