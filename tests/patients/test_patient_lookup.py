"""
Tests for patient search and patient detail lookup.
"""
from aarogya.auth.models import ApprovalStatus, UserRole


def test_doctor_searches_patients_by_name(client, make_user, auth_headers):
    doctor = make_user(UserRole.DOCTOR, ApprovalStatus.APPROVED)
    make_user(UserRole.PATIENT, name="Ravi Kumar")
    make_user(UserRole.PATIENT, name="Asha Rao")
    make_user(UserRole.PATIENT, name="Meena Iyer")

    response = client.get("/api/patients/search", params={"query": "ra"}, headers=auth_headers(doctor))

    assert response.status_code == 200
    names = [patient["name"] for patient in response.json()["data"]]
    assert names == ["Asha Rao", "Ravi Kumar"]


def test_search_matches_phone_and_email(client, make_user, auth_headers):
    doctor = make_user(UserRole.DOCTOR, ApprovalStatus.APPROVED)
    make_user(UserRole.PATIENT, name="Asha Rao", phone="9876543210", email="asha@example.com")

    by_phone = client.get("/api/patients/search", params={"query": "543"}, headers=auth_headers(doctor))
    by_email = client.get("/api/patients/search", params={"query": "ASHA@"}, headers=auth_headers(doctor))

    assert len(by_phone.json()["data"]) == 1
    assert len(by_email.json()["data"]) == 1


def test_search_treats_wildcards_literally(client, make_user, auth_headers):
    doctor = make_user(UserRole.DOCTOR, ApprovalStatus.APPROVED)
    make_user(UserRole.PATIENT, name="Asha Rao")

    response = client.get("/api/patients/search", params={"query": "%"}, headers=auth_headers(doctor))

    assert response.json()["data"] == []


def test_search_requires_query(client, make_user, auth_headers):
    doctor = make_user(UserRole.DOCTOR, ApprovalStatus.APPROVED)

    response = client.get("/api/patients/search", params={"query": "  "}, headers=auth_headers(doctor))

    assert response.status_code == 400


def test_search_is_for_doctors_only(client, make_user, auth_headers):
    patient = make_user(UserRole.PATIENT)
    lab = make_user(UserRole.LAB, ApprovalStatus.APPROVED)

    for user in (patient, lab):
        response = client.get("/api/patients/search", params={"query": "a"}, headers=auth_headers(user))
        assert response.status_code == 403


def test_doctor_reads_any_patient(client, make_user, auth_headers):
    doctor = make_user(UserRole.DOCTOR, ApprovalStatus.APPROVED)
    patient = make_user(UserRole.PATIENT, name="Asha Rao", age=34)

    response = client.get(f"/api/patients/{patient.patient_profile.id}", headers=auth_headers(doctor))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user_id"] == patient.id
    assert data["name"] == "Asha Rao"
    assert data["age"] == 34
    assert data["created_at"].endswith("+00:00")


def test_patient_reads_only_own_record(client, make_user, auth_headers):
    patient = make_user(UserRole.PATIENT)
    other = make_user(UserRole.PATIENT)

    own = client.get(f"/api/patients/{patient.patient_profile.id}", headers=auth_headers(patient))
    foreign = client.get(f"/api/patients/{other.patient_profile.id}", headers=auth_headers(patient))

    assert own.status_code == 200
    assert foreign.status_code == 403
    assert foreign.json()["error"] == "forbidden"


def test_unknown_patient_is_not_found(client, make_user, auth_headers):
    doctor = make_user(UserRole.DOCTOR, ApprovalStatus.APPROVED)

    response = client.get("/api/patients/missing", headers=auth_headers(doctor))

    assert response.status_code == 404
    assert response.json()["message"] == "Patient not found"
