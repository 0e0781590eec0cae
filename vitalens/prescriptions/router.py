"""
Prescription Router - API endpoints for the current doctor's prescriptions.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import get_current_user
from ..core.permissions import require_owner
from ..records.dependencies import get_record_store
from ..records.schemas import Prescription, PrescriptionCreate, StoredUser
from ..records.store import RecordStore

router = APIRouter()

@router.get("/", response_model=List[Prescription])
async def list_prescriptions(
    patient_id: Optional[str] = Query(None, description="Only prescriptions of this patient"),
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    prescriptions = store.get_prescriptions(current_user.id)
    if patient_id:
        prescriptions = [prescription for prescription in prescriptions if prescription.patient_id == patient_id]
    return prescriptions

@router.post("/", response_model=Prescription, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    prescription_data: PrescriptionCreate,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return store.add_prescription(prescription_data, current_user.id)

@router.get("/{prescription_id}", response_model=Prescription)
async def get_prescription(
    prescription_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return require_owner(store.get_prescription(prescription_id), current_user, "Prescription not found")

@router.put("/{prescription_id}", response_model=Prescription)
async def update_prescription(
    prescription_id: str,
    prescription_data: PrescriptionCreate,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    prescription = require_owner(store.get_prescription(prescription_id), current_user, "Prescription not found")
    if prescription_data.patient_id != prescription.patient_id:
        require_owner(store.get_patient(prescription_data.patient_id), current_user, "Patient not found")
    updated = prescription.model_copy(update=prescription_data.model_dump())
    store.update_prescription(updated)
    return updated

@router.delete("/{prescription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prescription(
    prescription_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    require_owner(store.get_prescription(prescription_id), current_user, "Prescription not found")
    store.delete_prescription(prescription_id)
