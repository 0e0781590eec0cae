"""
Report Schemas - Practice reports and dashboard figures.
"""
from typing import List
from ..core.schemas import CamelModel
from ..records.schemas import Appointment, Patient

class MonthlyCount(CamelModel):
    month: str
    year: int
    count: int

class GenderCount(CamelModel):
    gender: str
    count: int

class PracticeReport(CamelModel):
    appointments_per_month: List[MonthlyCount]
    patient_demographics: List[GenderCount]

class DashboardSummary(CamelModel):
    upcoming_appointments: List[Appointment]
    recent_patients: List[Patient]
    new_records_today: int
    new_patients_this_month: int
    upcoming_appointments_count: int
