"""
Report Service - Practice reports and dashboard figures computed from a
doctor's patients and appointments.

All functions are pure; the current date is passed in.
"""
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple
import logging

from ..records.schemas import Appointment, AppointmentStatus, Gender, Patient
from .schemas import DashboardSummary, GenderCount, MonthlyCount, PracticeReport

# Set up logging
logger = logging.getLogger(__name__)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
REPORT_MONTHS = 6
UPCOMING_LIMIT = 3
RECENT_PATIENTS_LIMIT = 5


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(f"Ignoring record with invalid date '{value}'")
        return None


def _time_key(value: str) -> Tuple[int, int]:
    hours, _, minutes = value.partition(":")
    return int(hours), int(minutes)


def _utc_date(moment: datetime) -> date:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).date()


def appointments_per_month(appointments: Sequence[Appointment], today: date) -> List[MonthlyCount]:
    """
    Count appointments in each of the six calendar months ending with today's month.

    Returns:
        Monthly counts, oldest month first
    """
    months = []
    year, month = today.year, today.month
    for _ in range(REPORT_MONTHS):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    months.reverse()

    counts = {key: 0 for key in months}
    for appointment in appointments:
        appointment_date = _parse_date(appointment.date)
        if appointment_date is None:
            continue
        key = (appointment_date.year, appointment_date.month)
        if key in counts:
            counts[key] += 1

    return [
        MonthlyCount(month=MONTH_NAMES[month - 1], year=year, count=counts[(year, month)])
        for year, month in months
    ]


def patient_demographics(patients: Sequence[Patient]) -> List[GenderCount]:
    """
    Count patients per gender, always listing Male, Female and Other.
    """
    counts = {gender: 0 for gender in Gender}
    for patient in patients:
        counts[patient.gender] += 1
    return [GenderCount(gender=gender.value, count=count) for gender, count in counts.items()]


def practice_report(
    patients: Sequence[Patient],
    appointments: Sequence[Appointment],
    today: date,
) -> PracticeReport:
    return PracticeReport(
        appointments_per_month=appointments_per_month(appointments, today),
        patient_demographics=patient_demographics(patients),
    )


def dashboard_summary(
    patients: Sequence[Patient],
    appointments: Sequence[Appointment],
    now: datetime,
) -> DashboardSummary:
    """
    Compute the dashboard figures for one doctor.

    Args:
        patients: The doctor's patients
        appointments: The doctor's appointments
        now: Current time

    Returns:
        DashboardSummary with upcoming appointments, recent patients and counts
    """
    today = _utc_date(now)
    next_week = today + timedelta(days=7)
    month_start = today - timedelta(days=30)

    scheduled = []
    for appointment in appointments:
        if appointment.status != AppointmentStatus.SCHEDULED:
            continue
        appointment_date = _parse_date(appointment.date)
        if appointment_date is not None and appointment_date >= today:
            scheduled.append((appointment_date, appointment))
    scheduled.sort(key=lambda item: (item[0], _time_key(item[1].time)))

    recent_patients = sorted(patients, key=lambda patient: patient.created_at, reverse=True)

    new_patients_today = sum(1 for patient in patients if _utc_date(patient.created_at) == today)
    new_appointments_today = sum(
        1 for appointment in appointments if _utc_date(appointment.created_at) == today
    )

    return DashboardSummary(
        upcoming_appointments=[appointment for _, appointment in scheduled[:UPCOMING_LIMIT]],
        recent_patients=recent_patients[:RECENT_PATIENTS_LIMIT],
        new_records_today=new_patients_today + new_appointments_today,
        new_patients_this_month=sum(
            1 for patient in patients if month_start <= _utc_date(patient.created_at) <= today
        ),
        upcoming_appointments_count=sum(
            1 for appointment_date, _ in scheduled if appointment_date <= next_week
        ),
    )
