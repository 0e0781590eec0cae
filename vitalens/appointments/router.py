"""
Appointment Router - API endpoints for the current doctor's appointments.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import get_current_user
from ..core.permissions import require_owner
from ..records.dependencies import get_record_store
from ..records.schemas import Appointment, AppointmentCreate, StoredUser
from ..records.store import RecordStore

router = APIRouter()

@router.get("/", response_model=List[Appointment])
async def list_appointments(
    patient_id: Optional[str] = Query(None, description="Only appointments of this patient"),
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    appointments = store.get_appointments(current_user.id)
    if patient_id:
        appointments = [appointment for appointment in appointments if appointment.patient_id == patient_id]
    return appointments

@router.post("/", response_model=Appointment, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: AppointmentCreate,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return store.add_appointment(appointment_data, current_user.id)

@router.get("/{appointment_id}", response_model=Appointment)
async def get_appointment(
    appointment_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return require_owner(store.get_appointment(appointment_id), current_user, "Appointment not found")

@router.put("/{appointment_id}", response_model=Appointment)
async def update_appointment(
    appointment_id: str,
    appointment_data: AppointmentCreate,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    appointment = require_owner(store.get_appointment(appointment_id), current_user, "Appointment not found")
    if appointment_data.patient_id != appointment.patient_id:
        require_owner(store.get_patient(appointment_data.patient_id), current_user, "Patient not found")
    updated = appointment.model_copy(update=appointment_data.model_dump())
    store.update_appointment(updated)
    return updated

@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    require_owner(store.get_appointment(appointment_id), current_user, "Appointment not found")
    store.delete_appointment(appointment_id)
