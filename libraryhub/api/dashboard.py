from fastapi import APIRouter, Depends

from libraryhub.api.deps import get_dashboard, get_repository, get_settings
from libraryhub.core.config import Settings
from libraryhub.db.repository import LibraryRepository
from libraryhub.schemas.dashboard import (
    DashboardStatsOut,
    PaymentStatsOut,
    RenewalReminderOut,
    StudentFeeRowOut,
    UpcomingFeeOut,
)
from libraryhub.schemas.students import StudentOut
from libraryhub.services.dashboard import DashboardService
from libraryhub.services.renewals import renewal_projection

router = APIRouter(prefix="/api", tags=["dashboard"])

@router.get("/dashboard/stats", response_model=DashboardStatsOut)
def dashboard_stats(dashboard: DashboardService = Depends(get_dashboard)):
    return dashboard.stats()

# Payment-side totals
@router.get("/dashboard/payment-stats", response_model=PaymentStatsOut)
def payment_stats(dashboard: DashboardService = Depends(get_dashboard)):
    return dashboard.payment_stats()

@router.get("/dashboard/upcoming-fees", response_model=list[UpcomingFeeOut])
def upcoming_fees(
    dashboard: DashboardService = Depends(get_dashboard),
    settings: Settings = Depends(get_settings),
):
    return dashboard.upcoming_fees(window_days=settings.upcoming_fee_window_days)

@router.get("/dashboard/recent-students", response_model=list[StudentOut])
def recent_students(dashboard: DashboardService = Depends(get_dashboard)):
    return dashboard.recent_students()

@router.get("/dashboard/students-with-fees", response_model=list[StudentFeeRowOut])
def students_with_fees(dashboard: DashboardService = Depends(get_dashboard)):
    return dashboard.students_with_fees()

@router.get("/renewal-reminders", response_model=list[RenewalReminderOut])
def renewal_reminders(repo: LibraryRepository = Depends(get_repository)):
    return renewal_projection(repo)
