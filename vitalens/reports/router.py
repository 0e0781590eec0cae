"""
Report Router - Practice reports and dashboard for the current doctor.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from ..auth.dependencies import get_current_user
from ..records.dependencies import get_record_store
from ..records.schemas import StoredUser
from ..records.store import RecordStore
from .schemas import DashboardSummary, PracticeReport
from .service import dashboard_summary, practice_report

router = APIRouter()

@router.get("/summary", response_model=PracticeReport)
async def get_practice_report(
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    """
    Appointments per month for the last six months and patient demographics.
    """
    return practice_report(
        store.get_patients(current_user.id),
        store.get_appointments(current_user.id),
        datetime.now(timezone.utc).date(),
    )

@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return dashboard_summary(
        store.get_patients(current_user.id),
        store.get_appointments(current_user.id),
        datetime.now(timezone.utc),
    )
