from fastapi import Depends, Request
from sqlalchemy.orm import Session

from libraryhub.core.config import Settings
from libraryhub.db.repository import LibraryRepository
from libraryhub.db.session import get_db
from libraryhub.services.billing import BillingService
from libraryhub.services.circulation import CirculationService
from libraryhub.services.dashboard import DashboardService

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_repository(db: Session = Depends(get_db)) -> LibraryRepository:
    return LibraryRepository(db)

def get_circulation(
        repo: LibraryRepository = Depends(get_repository),
        settings: Settings = Depends(get_settings),
) -> CirculationService:
    return CirculationService(repo, settings)

def get_billing(
        repo: LibraryRepository = Depends(get_repository),
        settings: Settings = Depends(get_settings),
) -> BillingService:
    return BillingService(repo, settings)

def get_dashboard(repo: LibraryRepository = Depends(get_repository)) -> DashboardService:
    return DashboardService(repo)
