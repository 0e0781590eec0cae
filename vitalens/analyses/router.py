"""
Analysis Router - Saved AI analyses attached to patient records.
"""
from typing import List
from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import get_current_user
from ..core.permissions import require_owner
from ..records.dependencies import get_record_store
from ..records.schemas import AnalysisCreate, MedicalAnalysis, StoredUser
from ..records.store import RecordStore

router = APIRouter()

@router.get("/", response_model=List[MedicalAnalysis])
async def list_patient_analyses(
    patient_id: str = Query(..., description="Patient whose analyses to list"),
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    require_owner(store.get_patient(patient_id), current_user, "Patient not found")
    return store.get_analyses_by_patient(patient_id)

@router.post("/", response_model=MedicalAnalysis, status_code=status.HTTP_201_CREATED)
async def save_analysis(
    analysis_data: AnalysisCreate,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    """
    Save an analysis result to a patient's record.

    The analysis type may be omitted; it then follows the result's kind.
    """
    return store.add_analysis(analysis_data, current_user.id)

@router.get("/{analysis_id}", response_model=MedicalAnalysis)
async def get_analysis(
    analysis_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    return require_owner(store.get_analysis(analysis_id), current_user, "Analysis not found")

@router.delete("/{analysis_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_analysis(
    analysis_id: str,
    store: RecordStore = Depends(get_record_store),
    current_user: StoredUser = Depends(get_current_user)
):
    require_owner(store.get_analysis(analysis_id), current_user, "Analysis not found")
    store.delete_analysis(analysis_id)
