"""
Tests for the patient, appointment, prescription and analysis endpoints.
"""
import pytest

from conftest import PNG_DATA_URI


@pytest.fixture
def patient(client, auth_headers, patient_fields):
    response = client.post("/api/v1/patients/", json=patient_fields, headers=auth_headers)
    assert response.status_code == 201
    return response.json()


def appointment_body(patient, **overrides):
    body = {
        "patientId": patient["id"],
        "patientName": patient["name"],
        "doctorName": "Dr. Emily Carter",
        "date": "2024-03-20",
        "time": "10:30",
        "reason": "Follow-up",
    }
    body.update(overrides)
    return body


def prescription_body(patient, **overrides):
    body = {
        "patientId": patient["id"],
        "patientName": patient["name"],
        "doctorName": "Dr. Emily Carter",
        "date": "2024-03-20",
        "medication": "Amoxicillin",
        "dosage": "500mg",
        "frequency": "Three times a day",
    }
    body.update(overrides)
    return body


def analysis_body(patient):
    return {
        "patientId": patient["id"],
        "originalImageDataUri": PNG_DATA_URI,
        "imagingModality": "Chest X-ray",
        "patientDetails": "Jane, 30F, cough",
        "analysisOutput": {
            "kind": "standard",
            "diagnosisSummary": "No acute findings.",
            "potentialConditions": "None",
            "relevantFindings": "Clear lung fields",
        },
    }


# Patients

def test_create_patient(patient, doctor, patient_fields):
    assert patient["id"].startswith("patient-")
    assert patient["doctorId"] == doctor.id
    assert patient["medicalHistory"] == patient_fields["medicalHistory"]
    assert "createdAt" in patient


def test_create_patient_ignores_client_ids(client, auth_headers, patient_fields, doctor):
    body = {**patient_fields, "id": "patient-forged", "doctorId": "user-someone-else"}

    response = client.post("/api/v1/patients/", json=body, headers=auth_headers)

    assert response.status_code == 201
    assert response.json()["id"] != "patient-forged"
    assert response.json()["doctorId"] == doctor.id


def test_create_patient_validates_date_of_birth(client, auth_headers, patient_fields):
    body = {**patient_fields, "dateOfBirth": "01/05/1994"}

    response = client.post("/api/v1/patients/", json=body, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["detail"] == "Validation error"


def test_patients_are_scoped_to_doctor(client, patient, auth_headers, other_auth_headers):
    assert [p["id"] for p in client.get("/api/v1/patients/", headers=auth_headers).json()] == [patient["id"]]
    assert client.get("/api/v1/patients/", headers=other_auth_headers).json() == []
    assert client.get(f"/api/v1/patients/{patient['id']}", headers=other_auth_headers).status_code == 404
    assert client.delete(f"/api/v1/patients/{patient['id']}", headers=other_auth_headers).status_code == 404


def test_update_patient_keeps_identity(client, patient, auth_headers, patient_fields):
    body = {**patient_fields, "name": "Jane Smith", "medicalHistory": []}

    response = client.put(f"/api/v1/patients/{patient['id']}", json=body, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Jane Smith"
    assert response.json()["id"] == patient["id"]
    assert response.json()["createdAt"] == patient["createdAt"]
    fetched = client.get(f"/api/v1/patients/{patient['id']}", headers=auth_headers).json()
    assert fetched["name"] == "Jane Smith"
    assert fetched["medicalHistory"] == []


def test_get_unknown_patient(client, auth_headers):
    response = client.get("/api/v1/patients/patient-missing", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Patient not found"


def test_delete_patient_cascades(client, patient, auth_headers):
    client.post("/api/v1/appointments/", json=appointment_body(patient), headers=auth_headers)
    client.post("/api/v1/prescriptions/", json=prescription_body(patient), headers=auth_headers)
    client.post("/api/v1/analyses/", json=analysis_body(patient), headers=auth_headers)

    record = client.get(f"/api/v1/patients/{patient['id']}/record", headers=auth_headers).json()
    assert len(record["appointments"]) == 1
    assert len(record["prescriptions"]) == 1
    assert len(record["analyses"]) == 1

    response = client.delete(f"/api/v1/patients/{patient['id']}", headers=auth_headers)

    assert response.status_code == 204
    assert client.get(f"/api/v1/patients/{patient['id']}", headers=auth_headers).status_code == 404
    assert client.get("/api/v1/appointments/", headers=auth_headers).json() == []
    assert client.get("/api/v1/prescriptions/", headers=auth_headers).json() == []


# Appointments

def test_appointment_lifecycle(client, patient, auth_headers):
    created = client.post("/api/v1/appointments/", json=appointment_body(patient), headers=auth_headers)
    assert created.status_code == 201
    appointment = created.json()
    assert appointment["status"] == "Scheduled"
    assert appointment["id"].startswith("appt-")

    updated = client.put(
        f"/api/v1/appointments/{appointment['id']}",
        json=appointment_body(patient, status="Completed"),
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "Completed"

    listed = client.get(f"/api/v1/appointments/?patient_id={patient['id']}", headers=auth_headers).json()
    assert [a["status"] for a in listed] == ["Completed"]

    assert client.delete(f"/api/v1/appointments/{appointment['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/appointments/{appointment['id']}", headers=auth_headers).status_code == 404


def test_appointment_for_unknown_patient(client, auth_headers):
    body = appointment_body({"id": "patient-missing", "name": "Ghost"})

    response = client.post("/api/v1/appointments/", json=body, headers=auth_headers)

    assert response.status_code == 404


def test_appointment_for_other_doctors_patient(client, patient, other_auth_headers):
    response = client.post("/api/v1/appointments/", json=appointment_body(patient), headers=other_auth_headers)

    assert response.status_code == 404


def test_appointment_validates_time(client, patient, auth_headers):
    response = client.post(
        "/api/v1/appointments/", json=appointment_body(patient, time="25:00"), headers=auth_headers
    )

    assert response.status_code == 422


# Prescriptions

def test_prescription_lifecycle(client, patient, auth_headers, other_auth_headers):
    created = client.post(
        "/api/v1/prescriptions/", json=prescription_body(patient, notes="With food"), headers=auth_headers
    )
    assert created.status_code == 201
    prescription = created.json()
    assert prescription["id"].startswith("presc-")
    assert prescription["notes"] == "With food"

    assert client.get(f"/api/v1/prescriptions/{prescription['id']}", headers=other_auth_headers).status_code == 404

    updated = client.put(
        f"/api/v1/prescriptions/{prescription['id']}",
        json=prescription_body(patient, dosage="250mg"),
        headers=auth_headers,
    )
    assert updated.json()["dosage"] == "250mg"
    assert updated.json()["notes"] is None

    assert client.delete(f"/api/v1/prescriptions/{prescription['id']}", headers=auth_headers).status_code == 204
    assert client.get("/api/v1/prescriptions/", headers=auth_headers).json() == []


# Analyses

def test_save_analysis_infers_type_from_output(client, patient, auth_headers):
    response = client.post("/api/v1/analyses/", json=analysis_body(patient), headers=auth_headers)

    assert response.status_code == 201
    analysis = response.json()
    assert analysis["analysisType"] == "Standard"
    assert analysis["analysisOutput"]["kind"] == "standard"

    listed = client.get(f"/api/v1/analyses/?patient_id={patient['id']}", headers=auth_headers).json()
    assert [a["id"] for a in listed] == [analysis["id"]]

    assert client.delete(f"/api/v1/analyses/{analysis['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/analyses/{analysis['id']}", headers=auth_headers).status_code == 404


def test_save_analysis_rejects_mismatched_type(client, patient, auth_headers):
    body = {**analysis_body(patient), "analysisType": "Dental X-ray"}

    response = client.post("/api/v1/analyses/", json=body, headers=auth_headers)

    assert response.status_code == 422


def test_list_analyses_of_other_doctors_patient(client, patient, other_auth_headers):
    response = client.get(f"/api/v1/analyses/?patient_id={patient['id']}", headers=other_auth_headers)

    assert response.status_code == 404


# Reports

def test_reports(client, patient, auth_headers):
    client.post("/api/v1/appointments/", json=appointment_body(patient), headers=auth_headers)

    summary = client.get("/api/v1/reports/summary", headers=auth_headers)
    dashboard = client.get("/api/v1/reports/dashboard", headers=auth_headers)

    assert summary.status_code == 200
    assert len(summary.json()["appointmentsPerMonth"]) == 6
    assert {"gender": "Female", "count": 1} in summary.json()["patientDemographics"]
    assert dashboard.status_code == 200
    assert dashboard.json()["recentPatients"][0]["id"] == patient["id"]
    assert dashboard.json()["newPatientsThisMonth"] == 1


def test_record_routes_require_authentication(client):
    for path in ["/api/v1/patients/", "/api/v1/appointments/", "/api/v1/prescriptions/", "/api/v1/reports/dashboard"]:
        assert client.get(path).status_code == 401


def test_appointment_accepts_single_digit_hour(client, patient, auth_headers):
    response = client.post(
        "/api/v1/appointments/", json=appointment_body(patient, time="9:30"), headers=auth_headers
    )

    assert response.status_code == 201
    assert response.json()["time"] == "9:30"
