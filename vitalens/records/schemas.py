"""
Record Schemas - Pydantic models for the stored record collections.

Field names serialize to camelCase so the stored JSON matches the layout
written by the browser build.
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import Field, model_validator

from ..core.schemas import CamelModel
from ..ai.schemas import AnalysisOutput

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class AppointmentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class AnalysisType(str, Enum):
    DENTAL_XRAY = "Dental X-ray"
    STANDARD = "Standard"


ANALYSIS_KINDS = {
    AnalysisType.DENTAL_XRAY.value: "dental",
    AnalysisType.STANDARD.value: "standard",
}


class Record(CamelModel):
    """
    Fields set by the store when a record is created.

    Fields:
    - id: Unique identifier within the collection
    - created_at: Creation time, never changed afterwards
    """
    id: str
    created_at: datetime


# Users

class Credentials(CamelModel):
    doctor_id: str = Field(..., min_length=1, description="Login identifier of the doctor")
    password: str = Field(..., min_length=1)


class StoredUser(Record):
    name: str
    doctor_id: str
    password: str


# Patients

class PatientBase(CamelModel):
    name: str = Field(..., min_length=1)
    date_of_birth: str = Field(..., pattern=DATE_PATTERN, description="yyyy-MM-dd")
    gender: Gender
    contact: str = ""
    address: str = ""
    medical_history: List[str] = Field(default_factory=list)


class PatientCreate(PatientBase):
    pass


class Patient(PatientBase, Record):
    doctor_id: str


# Appointments

class AppointmentBase(CamelModel):
    patient_id: str
    patient_name: str = Field(..., min_length=1)
    doctor_name: str = Field(..., min_length=1)
    date: str = Field(..., pattern=DATE_PATTERN, description="yyyy-MM-dd")
    time: str = Field(..., pattern=TIME_PATTERN, description="H:MM or HH:MM, 24-hour")
    reason: str = Field(..., min_length=1)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED


class AppointmentCreate(AppointmentBase):
    pass


class Appointment(AppointmentBase, Record):
    doctor_id: str


# Prescriptions

class PrescriptionBase(CamelModel):
    patient_id: str
    patient_name: str = Field(..., min_length=1)
    doctor_name: str = Field(..., min_length=1)
    date: str = Field(..., pattern=DATE_PATTERN, description="yyyy-MM-dd")
    medication: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    frequency: str = Field(..., min_length=1)
    notes: Optional[str] = None


class PrescriptionCreate(PrescriptionBase):
    pass


class Prescription(PrescriptionBase, Record):
    doctor_id: str


# Medical analyses

class AnalysisBase(CamelModel):
    patient_id: str
    original_image_data_uri: str
    analysis_type: AnalysisType
    analysis_output: AnalysisOutput
    imaging_modality: str
    patient_details: str

    @model_validator(mode="before")
    @classmethod
    def tag_analysis_output(cls, data: Any) -> Any:
        """
        Fill in whichever of analysisType and the output's kind is missing.

        Rows written before outputs carried a kind are tagged from their
        analysisType; new requests may omit analysisType and rely on the kind.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        output_key = "analysisOutput" if "analysisOutput" in data else "analysis_output"
        type_key = "analysisType" if "analysisType" in data else "analysis_type"
        output = data.get(output_key)
        analysis_type = data.get(type_key)
        if isinstance(analysis_type, AnalysisType):
            analysis_type = analysis_type.value

        if isinstance(output, dict) and "kind" not in output and analysis_type in ANALYSIS_KINDS:
            data[output_key] = {**output, "kind": ANALYSIS_KINDS[analysis_type]}
        elif analysis_type is None:
            kind = output.get("kind") if isinstance(output, dict) else getattr(output, "kind", None)
            for type_value, type_kind in ANALYSIS_KINDS.items():
                if kind == type_kind:
                    data[type_key] = type_value
        return data

    @model_validator(mode="after")
    def check_analysis_type(self):
        if ANALYSIS_KINDS[self.analysis_type.value] != self.analysis_output.kind:
            raise ValueError(
                f"analysisType '{self.analysis_type.value}' does not match "
                f"analysis output kind '{self.analysis_output.kind}'"
            )
        return self


class AnalysisCreate(AnalysisBase):
    pass


class MedicalAnalysis(AnalysisBase, Record):
    doctor_id: str


class PatientRecord(CamelModel):
    """A patient together with every record that references the patient."""
    patient: Patient
    appointments: List[Appointment]
    prescriptions: List[Prescription]
    analyses: List[MedicalAnalysis]
