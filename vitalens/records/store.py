"""
Record Store - Data access for users, patients, appointments, prescriptions
and medical analyses.

Doctor-scoped collections are filtered by exact doctorId equality. Deleting
a patient cascades to every appointment, prescription and analysis that
references the patient. Each collection is persisted under its own key, so
the cascade is not atomic across collections.
"""
from typing import Any, Dict, List, Mapping, Optional, Type, Union
import logging

from pydantic import BaseModel

from ..config import StorageKeys
from ..core.security import hash_password, verify_password
from ..storage import KeyValueStorage
from .collection import RecordCollection
from .exceptions import DuplicateAccountException, RecordReferenceException
from .schemas import (
    AnalysisCreate,
    Appointment,
    AppointmentCreate,
    Credentials,
    MedicalAnalysis,
    Patient,
    PatientCreate,
    PatientRecord,
    Prescription,
    PrescriptionCreate,
    StoredUser,
)

# Set up logging
logger = logging.getLogger(__name__)

# Display names handed out to new accounts in signup order.
DOCTOR_NAMES = [
    "Dr. Emily Carter",
    "Dr. Ben Adams",
    "Dr. Olivia Chen",
    "Dr. Marcus Rodriguez",
    "Dr. Sofia Garcia",
    "Dr. Leo Kim",
    "Dr. Isabella Rossi",
    "Dr. Ethan Williams",
]

Fields = Union[BaseModel, Mapping[str, Any]]


def _as_fields(fields: Fields, schema: Type[BaseModel]) -> Dict[str, Any]:
    """
    Normalize caller fields to snake_case keys.

    Plain mappings may use either the stored camelCase names or the Python
    names; they are validated through the create schema.
    """
    if not isinstance(fields, BaseModel):
        fields = schema.model_validate(dict(fields))
    return fields.model_dump()


class RecordStore:
    """
    Facade over the five record collections.

    Args:
        storage: Key-value storage backend shared by all collections
        keys: Storage key of each collection
    """

    def __init__(self, storage: KeyValueStorage, keys: Optional[StorageKeys] = None):
        self.storage = storage
        self.keys = keys or StorageKeys()
        self.users = RecordCollection(storage, self.keys.users, StoredUser, "user")
        self.patients = RecordCollection(storage, self.keys.patients, Patient, "patient")
        self.appointments = RecordCollection(storage, self.keys.appointments, Appointment, "appt")
        self.prescriptions = RecordCollection(storage, self.keys.prescriptions, Prescription, "presc")
        self.analyses = RecordCollection(storage, self.keys.analyses, MedicalAnalysis, "analysis")

    # ------------------------------------------------------------------
    # Users (global)
    # ------------------------------------------------------------------

    def get_users(self) -> List[StoredUser]:
        return self.users.get_all()

    def get_user(self, user_id: str) -> Optional[StoredUser]:
        return self.users.get_by_id(user_id)

    def add_user(self, credentials: Credentials) -> StoredUser:
        """
        Register a new doctor account.

        Args:
            credentials: Doctor ID and plain text password

        Returns:
            StoredUser: The new user with an assigned display name

        Raises:
            DuplicateAccountException: If the doctor ID is taken (case-insensitive)
        """
        users = self.users.get_all()
        doctor_id = credentials.doctor_id.lower()
        if any(user.doctor_id.lower() == doctor_id for user in users):
            logger.warning(f"Signup rejected, doctor ID already registered: {credentials.doctor_id}")
            raise DuplicateAccountException()

        assigned_name = DOCTOR_NAMES[len(users) % len(DOCTOR_NAMES)]
        user = self.users.add({
            "doctor_id": credentials.doctor_id,
            "password": hash_password(credentials.password),
            "name": assigned_name,
        })
        logger.info(f"Registered doctor {user.doctor_id} as {user.name}")
        return user

    def find_user(self, credentials: Credentials) -> Optional[StoredUser]:
        """
        Look up a user by doctor ID (case-insensitive) and password.

        A stored password in a deprecated format is rehashed on a match.

        Returns:
            The matching user, or None if no user matches
        """
        doctor_id = credentials.doctor_id.lower()
        for user in self.users.get_all():
            if user.doctor_id.lower() != doctor_id:
                continue
            matches, new_hash = verify_password(credentials.password, user.password)
            if not matches:
                continue
            if new_hash:
                user = user.model_copy(update={"password": new_hash})
                self.users.update(user)
                logger.info(f"Upgraded password hash for user {user.id}")
            return user
        return None

    # ------------------------------------------------------------------
    # Patients (doctor-scoped)
    # ------------------------------------------------------------------

    def get_patients(self, doctor_id: str) -> List[Patient]:
        return self.patients.get_by_owner(doctor_id)

    def get_patient(self, patient_id: str) -> Optional[Patient]:
        return self.patients.get_by_id(patient_id)

    def add_patient(self, fields: Fields, doctor_id: str) -> Patient:
        self._require_user(doctor_id)
        return self.patients.add(_as_fields(fields, PatientCreate), doctor_id=doctor_id)

    def update_patient(self, patient: Patient) -> None:
        self.patients.update(patient)

    def delete_patient(self, patient_id: str) -> None:
        """
        Delete a patient and every record referencing the patient.
        """
        self.patients.delete(patient_id)
        removed_appointments = self.appointments.delete_where("patient_id", patient_id)
        removed_prescriptions = self.prescriptions.delete_where("patient_id", patient_id)
        removed_analyses = self.analyses.delete_where("patient_id", patient_id)
        logger.info(
            f"Deleted patient {patient_id} with {removed_appointments} appointment(s), "
            f"{removed_prescriptions} prescription(s) and {removed_analyses} analysis record(s)"
        )

    def get_patient_record(self, patient_id: str) -> Optional[PatientRecord]:
        patient = self.get_patient(patient_id)
        if not patient:
            return None
        return PatientRecord(
            patient=patient,
            appointments=self.get_appointments_by_patient(patient_id),
            prescriptions=self.get_prescriptions_by_patient(patient_id),
            analyses=self.get_analyses_by_patient(patient_id),
        )

    # ------------------------------------------------------------------
    # Appointments (doctor-scoped)
    # ------------------------------------------------------------------

    def get_appointments(self, doctor_id: str) -> List[Appointment]:
        return self.appointments.get_by_owner(doctor_id)

    def get_appointments_by_patient(self, patient_id: str) -> List[Appointment]:
        return self.appointments.get_by_patient(patient_id)

    def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        return self.appointments.get_by_id(appointment_id)

    def add_appointment(self, fields: Fields, doctor_id: str) -> Appointment:
        fields = _as_fields(fields, AppointmentCreate)
        self._require_patient(fields.get("patient_id"), doctor_id)
        return self.appointments.add(fields, doctor_id=doctor_id)

    def update_appointment(self, appointment: Appointment) -> None:
        self.appointments.update(appointment)

    def delete_appointment(self, appointment_id: str) -> None:
        self.appointments.delete(appointment_id)

    # ------------------------------------------------------------------
    # Prescriptions (doctor-scoped)
    # ------------------------------------------------------------------

    def get_prescriptions(self, doctor_id: str) -> List[Prescription]:
        return self.prescriptions.get_by_owner(doctor_id)

    def get_prescriptions_by_patient(self, patient_id: str) -> List[Prescription]:
        return self.prescriptions.get_by_patient(patient_id)

    def get_prescription(self, prescription_id: str) -> Optional[Prescription]:
        return self.prescriptions.get_by_id(prescription_id)

    def add_prescription(self, fields: Fields, doctor_id: str) -> Prescription:
        fields = _as_fields(fields, PrescriptionCreate)
        self._require_patient(fields.get("patient_id"), doctor_id)
        return self.prescriptions.add(fields, doctor_id=doctor_id)

    def update_prescription(self, prescription: Prescription) -> None:
        self.prescriptions.update(prescription)

    def delete_prescription(self, prescription_id: str) -> None:
        self.prescriptions.delete(prescription_id)

    # ------------------------------------------------------------------
    # Medical analyses
    # ------------------------------------------------------------------

    def get_analyses_by_patient(self, patient_id: str) -> List[MedicalAnalysis]:
        return self.analyses.get_by_patient(patient_id)

    def get_analysis(self, analysis_id: str) -> Optional[MedicalAnalysis]:
        return self.analyses.get_by_id(analysis_id)

    def add_analysis(self, fields: Fields, doctor_id: str) -> MedicalAnalysis:
        fields = _as_fields(fields, AnalysisCreate)
        self._require_patient(fields.get("patient_id"), doctor_id)
        return self.analyses.add(fields, doctor_id=doctor_id)

    def delete_analysis(self, analysis_id: str) -> None:
        self.analyses.delete(analysis_id)

    # ------------------------------------------------------------------
    # Reference checks
    # ------------------------------------------------------------------

    def _require_user(self, doctor_id: str) -> StoredUser:
        user = self.get_user(doctor_id)
        if not user:
            raise RecordReferenceException(f"User {doctor_id} does not exist")
        return user

    def _require_patient(self, patient_id: Optional[str], doctor_id: str) -> Patient:
        self._require_user(doctor_id)
        patient = self.get_patient(patient_id) if patient_id else None
        if not patient or patient.doctor_id != doctor_id:
            raise RecordReferenceException(f"Patient {patient_id} does not exist")
        return patient
