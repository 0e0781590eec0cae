"""
Patient Router - API endpoints for the current doctor's patients.

Deleting a patient also deletes the patient's appointments, prescriptions
and saved analyses.
"""
from typing import List
from fastapi import APIRouter, Depends, status

from ..auth.dependencies import get_current_user
from ..core.permissions import require_owner
from ..records.dependencies import get_record_store
from ..records.schemas import Patient, PatientCreate, PatientRecord, StoredUser
from ..records.store import RecordStore

router = APIRouter()

@router.get("/", response_model=List[Patient])
async def list_patients(
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    """
    List the current doctor's patients in creation order.
    """
    return store.get_patients(current_user.id)

@router.post("/", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient_data: PatientCreate,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return store.add_patient(patient_data, current_user.id)

@router.get("/{patient_id}", response_model=Patient)
async def get_patient(
    patient_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return require_owner(store.get_patient(patient_id), current_user, "Patient not found")

@router.get("/{patient_id}/record", response_model=PatientRecord)
async def get_patient_record(
    patient_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    """
    Get a patient with their appointments, prescriptions and saved analyses.
    """
    require_owner(store.get_patient(patient_id), current_user, "Patient not found")
    return store.get_patient_record(patient_id)

@router.put("/{patient_id}", response_model=Patient)
async def update_patient(
    patient_id: str,
    patient_data: PatientCreate,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    """
    Replace a patient's details. The id, owner and creation time are kept.
    """
    patient = require_owner(store.get_patient(patient_id), current_user, "Patient not found")
    updated = patient.model_copy(update=patient_data.model_dump())
    store.update_patient(updated)
    return updated

@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient(
    patient_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    require_owner(store.get_patient(patient_id), current_user, "Patient not found")
    store.delete_patient(patient_id)
