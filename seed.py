# seed.py

from sqlmodel import Session

from app.core.config import get_settings
from app.database import create_db_and_tables, engine
from app.main import app  # noqa: F401  (registers every table model)
from app.repositories.admin_user_repo import AdminUserRepository
from app.repositories.settings_repo import SiteSettingsRepository
from app.services.admin_user_service import AdminUserService
from app.services.settings_service import SiteSettingsService


def main():
    print("Seeding database...")
    create_db_and_tables()

    settings = get_settings()
    with Session(engine) as session:
        admin = AdminUserService(AdminUserRepository()).ensure_bootstrap_admin(session, settings)
        if admin is not None:
            print(f"Created superadmin {admin.username!r}")
        else:
            print("Admin user already exists (or BOOTSTRAP_ADMIN_* not set)")

        site = SiteSettingsService(SiteSettingsRepository()).get_settings(session)
        print(f"Site settings ready: {site.site_name}")

    print("Database seeding completed!")


if __name__ == "__main__":
    main()
