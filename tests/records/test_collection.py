"""
Tests for the generic JSON-array record collection.
"""
import json

from vitalens.records.collection import RecordCollection, generate_record_id
from vitalens.records.schemas import Patient
from vitalens.storage import MemoryStorage, NullStorage

KEY = "emr-patients"


def make_collection(storage=None):
    return RecordCollection(storage or MemoryStorage(), KEY, Patient, "patient")


def test_missing_key_reads_as_empty():
    assert make_collection().get_all() == []


def test_unparseable_json_reads_as_empty():
    storage = MemoryStorage({KEY: "{not json"})
    assert make_collection(storage).get_all() == []


def test_non_array_document_reads_as_empty():
    storage = MemoryStorage({KEY: json.dumps({"id": "patient-1"})})
    assert make_collection(storage).get_all() == []


def test_invalid_rows_are_skipped(patient_fields):
    collection = make_collection()
    patient = collection.add(patient_fields, doctor_id="user-1")
    rows = json.loads(collection.storage.get_item(KEY))
    collection.storage.set_item(KEY, json.dumps([None, {"id": "broken"}] + rows))

    assert [p.id for p in collection.get_all()] == [patient.id]


def test_generated_ids_have_prefix_and_suffix():
    record_id = generate_record_id("appt")
    prefix, millis, suffix = record_id.split("-")
    assert prefix == "appt"
    assert millis.isdigit()
    assert len(suffix) == 7


def test_ids_are_unique(patient_fields):
    collection = make_collection()
    ids = [collection.add(patient_fields, doctor_id="user-1").id for _ in range(50)]
    assert len(set(ids)) == 50


def test_add_then_get_by_id_round_trips(patient_fields):
    collection = make_collection()
    patient = collection.add(patient_fields, doctor_id="user-1")

    assert collection.get_by_id(patient.id) == patient
    assert patient.doctor_id == "user-1"
    assert patient.medical_history == ["Asthma", "Penicillin allergy"]
    assert patient.created_at.tzinfo is not None


def test_stored_json_uses_camel_case_field_names(patient_fields):
    collection = make_collection()
    collection.add(patient_fields, doctor_id="user-1")

    row = json.loads(collection.storage.get_item(KEY))[0]
    assert set(row) == {
        "id", "doctorId", "name", "dateOfBirth", "gender", "contact",
        "address", "medicalHistory", "createdAt",
    }


def test_add_ignores_caller_supplied_id_and_owner(patient_fields):
    collection = make_collection()
    patient = collection.add(
        {**patient_fields, "id": "patient-chosen", "doctorId": "user-other", "createdAt": "2000-01-01T00:00:00Z"},
        doctor_id="user-1",
    )

    assert patient.id != "patient-chosen"
    assert patient.doctor_id == "user-1"
    assert patient.created_at.year != 2000


def test_get_all_keeps_insertion_order(patient_fields):
    collection = make_collection()
    first = collection.add({**patient_fields, "name": "First"}, doctor_id="user-1")
    second = collection.add({**patient_fields, "name": "Second"}, doctor_id="user-2")

    assert [p.id for p in collection.get_all()] == [first.id, second.id]


def test_get_by_owner_is_exact_and_repeatable(patient_fields):
    collection = make_collection()
    mine = collection.add(patient_fields, doctor_id="user-1")
    collection.add(patient_fields, doctor_id="user-10")

    assert collection.get_by_owner("user-1") == [mine]
    assert collection.get_by_owner("user-1") == collection.get_by_owner("user-1")
    assert collection.get_by_owner("user-404") == []


def test_get_by_id_returns_none_for_unknown_id():
    assert make_collection().get_by_id("no-such-id") is None


def test_update_replaces_record_and_keeps_created_at(patient_fields):
    collection = make_collection()
    patient = collection.add(patient_fields, doctor_id="user-1")

    changed = patient.model_copy(update={"name": "Jane Smith", "created_at": patient.created_at.replace(year=2001)})
    collection.update(changed)

    stored = collection.get_by_id(patient.id)
    assert stored.name == "Jane Smith"
    assert stored.created_at == patient.created_at


def test_update_unknown_id_does_not_insert(patient_fields):
    collection = make_collection()
    patient = collection.add(patient_fields, doctor_id="user-1")

    collection.update(patient.model_copy(update={"id": "patient-ghost"}))

    assert [p.id for p in collection.get_all()] == [patient.id]


def test_delete_unknown_id_leaves_collection_unchanged(patient_fields):
    collection = make_collection()
    patient = collection.add(patient_fields, doctor_id="user-1")

    collection.delete("no-such-id")

    assert collection.get_all() == [patient]


def test_delete_where_reports_removed_count(patient_fields):
    collection = make_collection()
    collection.add(patient_fields, doctor_id="user-1")
    collection.add(patient_fields, doctor_id="user-1")
    kept = collection.add(patient_fields, doctor_id="user-2")

    assert collection.delete_where("doctor_id", "user-1") == 2
    assert collection.get_all() == [kept]


def test_unavailable_storage_degrades_to_empty(patient_fields):
    collection = make_collection(NullStorage())
    patient = collection.add(patient_fields, doctor_id="user-1")

    assert patient.id.startswith("patient-")
    assert collection.get_all() == []
    collection.delete(patient.id)


def test_unreadable_rows_survive_writes(patient_fields):
    collection = make_collection()
    legacy = {"id": "patient-legacy", "doctorId": "user-1", "name": "Legacy", "dateOfBirth": "1/5/1994"}
    collection.storage.set_item(KEY, json.dumps([legacy]))

    added = collection.add(patient_fields, doctor_id="user-1")
    collection.update(added.model_copy(update={"name": "Renamed"}))
    collection.delete_where("doctor_id", "user-2")

    rows = json.loads(collection.storage.get_item(KEY))
    assert rows[0] == legacy
    assert [row["name"] for row in rows] == ["Legacy", "Renamed"]
    assert [p.id for p in collection.get_all()] == [added.id]


def test_delete_where_removes_matching_unreadable_rows(patient_fields):
    collection = make_collection()
    kept = collection.add(patient_fields, doctor_id="user-2")
    rows = json.loads(collection.storage.get_item(KEY))
    broken = {"id": "patient-broken", "doctorId": "user-1"}
    collection.storage.set_item(KEY, json.dumps([broken] + rows))

    assert collection.delete_where("doctor_id", "user-1") == 1
    assert json.loads(collection.storage.get_item(KEY)) == rows
    assert collection.get_all() == [kept]


def test_delete_without_match_does_not_rewrite_storage():
    storage = MemoryStorage({KEY: "{not json"})
    collection = make_collection(storage)

    collection.delete("no-such-id")
    assert collection.delete_where("doctor_id", "user-1") == 0

    assert storage.get_item(KEY) == "{not json"
